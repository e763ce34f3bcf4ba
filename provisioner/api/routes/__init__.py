from fastapi import FastAPI

from . import contacts, health, provisioning, records


def register_routes(app: FastAPI) -> None:
    """Attach all API routers to the FastAPI application."""
    app.include_router(health.router)
    app.include_router(records.router)
    app.include_router(contacts.router)
    app.include_router(provisioning.router)
