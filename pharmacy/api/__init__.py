# pharmacy/api/__init__.py
from fastapi import FastAPI

from pharmacy.api.errors import register_exception_handlers
from pharmacy.api.routers import admin, auth, carts, catalog, courier, orders, telegram, users
from pharmacy.api.routers.health import router as health_router


def create_app() -> FastAPI:
    app = FastAPI(
        title="Pharmacy Service",
        version="1.0.0",
    )

    register_exception_handlers(app)

    # Include routers
    app.include_router(health_router)
    app.include_router(auth.router)
    app.include_router(users.router)
    app.include_router(catalog.router)
    app.include_router(carts.router)
    app.include_router(orders.router)
    app.include_router(courier.router)
    app.include_router(admin.router)
    app.include_router(telegram.router)

    return app
