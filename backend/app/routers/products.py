import logging
from fastapi import APIRouter, Depends
from app.dependencies import get_product_repository
from app.errors import ErrorType, NOT_FOUND_MESSAGE
from app.exceptions import AppException
from app.repositories.product_repository import ProductRepository
from app.schemas.product import (
    ErrorResponse,
    MessageResponse,
    ProductCreate,
    ProductListResponse,
    ProductOut,
    ProductResponse,
    ProductUpdate,
    ValidationErrorResponse,
)
from app.validation import (
    CREATE_PRODUCT_RULES,
    ID_RULES,
    UPDATE_PRODUCT_RULES,
    ValidatedRequest,
    validate_request,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/products", tags=["products"])

DELETED_MESSAGE = "Producto Eliminado"

INVALID = {400: {"model": ValidationErrorResponse, "description": "Invalid input"}}
NOT_FOUND = {404: {"model": ErrorResponse, "description": "Product not found"}}
SERVER_ERROR = {500: {"model": ErrorResponse, "description": "Database error"}}


def not_found(product_id: int) -> AppException:
    logger.info(f"Product {product_id} not found")
    return AppException(ErrorType.NOT_FOUND, NOT_FOUND_MESSAGE)


@router.get("", response_model=ProductListResponse, responses=SERVER_ERROR)
async def get_products(repo: ProductRepository = Depends(get_product_repository)):
    """List every product, newest first."""
    products = await repo.find_all(order="desc")
    return ProductListResponse(data=[ProductOut.model_validate(p) for p in products])


@router.get("/{id}", response_model=ProductResponse, responses={**INVALID, **NOT_FOUND, **SERVER_ERROR})
async def get_product_by_id(
    validated: ValidatedRequest = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_product_repository),
):
    product = await repo.find_by_id(validated.product_id)
    if product is None:
        raise not_found(validated.product_id)
    return ProductResponse(data=ProductOut.model_validate(product))


@router.post("", response_model=ProductResponse, responses={**INVALID, **SERVER_ERROR})
async def create_product(
    validated: ValidatedRequest = Depends(validate_request(CREATE_PRODUCT_RULES, ProductCreate)),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Create a product; availability starts as true."""
    product = await repo.create(validated.payload.model_dump())
    return ProductResponse(data=ProductOut.model_validate(product))


@router.put("/{id}", response_model=ProductResponse, responses={**INVALID, **NOT_FOUND, **SERVER_ERROR})
async def update_product(
    validated: ValidatedRequest = Depends(validate_request(UPDATE_PRODUCT_RULES, ProductUpdate)),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Replace name, price and availability of an existing product."""
    product = await repo.update(validated.product_id, validated.payload.model_dump())
    if product is None:
        raise not_found(validated.product_id)
    return ProductResponse(data=ProductOut.model_validate(product))


@router.patch(
    "/{id}",
    status_code=201,
    response_model=ProductResponse,
    responses={**INVALID, **NOT_FOUND, **SERVER_ERROR},
)
async def update_availability(
    validated: ValidatedRequest = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_product_repository),
):
    """Flip the availability flag of a product."""
    product = await repo.toggle_availability(validated.product_id)
    if product is None:
        raise not_found(validated.product_id)
    return ProductResponse(data=ProductOut.model_validate(product))


@router.delete("/{id}", response_model=MessageResponse, responses={**INVALID, **NOT_FOUND, **SERVER_ERROR})
async def delete_product(
    validated: ValidatedRequest = Depends(validate_request(ID_RULES)),
    repo: ProductRepository = Depends(get_product_repository),
):
    deleted = await repo.delete(validated.product_id)
    if not deleted:
        raise not_found(validated.product_id)
    return MessageResponse(data=DELETED_MESSAGE)
