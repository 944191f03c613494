"""
Mega Gateway Application
========================

FastAPI service that checks the caller's session and forwards merge-request
comment operations to the internal Mega API.

Subpackages:
    - auth:  session JWT verification
    - proxy: routes and the internal API client
"""
