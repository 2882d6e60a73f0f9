# bookshop/api/__init__.py
from fastapi import FastAPI

from bookshop.api.errors import register_exception_handlers
from bookshop.api.routers import books, genres, health, transactions, users


def include_routers(app: FastAPI) -> None:
    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(genres.router)
    app.include_router(books.router)
    app.include_router(transactions.router)
    register_exception_handlers(app)
