"""
Proxy Package
=============

Authenticated proxy endpoints that forward validated requests from web
clients to the internal Mega API.

Main Components:
----------------
- routes.py: FastAPI router with proxy endpoints
- client.py: Outbound URL building and internal API calls

Usage:
------
    from mega_gateway.app.proxy import proxy_router
    app.include_router(proxy_router)
"""

from .routes import proxy_router

__all__ = ["proxy_router"]
