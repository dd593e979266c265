"""
FastAPI routers grouped by domain (users, auth, chirps, hooks, admin).

Each file inside this package exposes an APIRouter that is included in the
main application (app.py).
"""
