from fastapi import Request

from app.db.database import Database
from app.repositories.product_repository import ProductRepository


def get_database(request: Request) -> Database:
    return request.app.state.db


def get_product_repository(request: Request) -> ProductRepository:
    return ProductRepository(get_database(request))
