# storefront/api/__init__.py
from fastapi import FastAPI
from storefront.api.routers import admin, auth, health, orders, products


def include_routers(app: FastAPI):
    app.include_router(health.router)
    app.include_router(auth.router)
    app.include_router(products.router)
    app.include_router(orders.router)
    app.include_router(admin.router)
