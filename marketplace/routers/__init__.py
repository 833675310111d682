"""
FastAPI routers grouped by domain (auth, listing resources).

Each module exposes a function or APIRouter included by app.create_app; the
handlers resolve their services from ``request.app.state``.
"""
