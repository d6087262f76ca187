"""
Catalog API: Product Route Handlers
=====================================

What:  /products collection and /products/{id} item endpoints.

    GET    /products                 list (joined with category)
    GET    /products?category_id=N   list filtered by category
    POST   /products                 create (201)
    GET    /products/{id}            get one
    PUT    /products/{id}            update
    DELETE /products/{id}            delete

category_id is taken as a raw string and parsed here so that a
non-integer value is a 400 "Invalid category_id parameter" instead of
FastAPI's 422. An empty value counts as absent.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query

from catalog.schemas.envelope import Envelope
from catalog.schemas.product import Product, ProductInput
from catalog.services.product_service import ProductService
from catalog.routes.deps import (
    get_product_service,
    json_body,
    parse_id,
    parse_optional_int,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

product_body = json_body(ProductInput)


def product_id_path(
    product_id: str = Path(description="Positive integer product id"),
) -> int:
    return parse_id(product_id, "Invalid product ID")


def category_filter(
    category_id: Optional[str] = Query(
        default=None,
        description="Only return products filed under this category id",
    ),
) -> Optional[int]:
    return parse_optional_int(category_id, "Invalid category_id parameter")


@router.get(
    "",
    response_model=Envelope[List[Product]],
    response_model_exclude_none=True,
    summary="List products, optionally filtered by category",
)
@router.get(
    "/",
    response_model=Envelope[List[Product]],
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def list_products(
    category_id: Optional[int] = Depends(category_filter),
    service: ProductService = Depends(get_product_service),
) -> Envelope[List[Product]]:
    products = await service.list_products(category_id=category_id)
    return Envelope[List[Product]](
        success=True,
        message="Products retrieved successfully",
        data=products,
    )


@router.post(
    "",
    status_code=201,
    response_model=Envelope[Product],
    response_model_exclude_none=True,
    summary="Create a product",
)
@router.post(
    "/",
    status_code=201,
    response_model=Envelope[Product],
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def create_product(
    payload: ProductInput = Depends(product_body),
    service: ProductService = Depends(get_product_service),
) -> Envelope[Product]:
    product = await service.create_product(payload)
    return Envelope[Product](
        success=True,
        message="Product created successfully",
        data=product,
    )


@router.get(
    "/{product_id:path}",
    response_model=Envelope[Product],
    response_model_exclude_none=True,
    summary="Get a product by id",
)
async def get_product(
    product_id: int = Depends(product_id_path),
    service: ProductService = Depends(get_product_service),
) -> Envelope[Product]:
    product = await service.get_product(product_id)
    return Envelope[Product](
        success=True,
        message="Product retrieved successfully",
        data=product,
    )


@router.put(
    "/{product_id:path}",
    response_model=Envelope[Product],
    response_model_exclude_none=True,
    summary="Update a product",
)
async def update_product(
    product_id: int = Depends(product_id_path),
    payload: ProductInput = Depends(product_body),
    service: ProductService = Depends(get_product_service),
) -> Envelope[Product]:
    product = await service.update_product(product_id, payload)
    return Envelope[Product](
        success=True,
        message="Product updated successfully",
        data=product,
    )


@router.delete(
    "/{product_id:path}",
    response_model=Envelope[None],
    response_model_exclude_none=True,
    summary="Delete a product",
)
async def delete_product(
    product_id: int = Depends(product_id_path),
    service: ProductService = Depends(get_product_service),
) -> Envelope[None]:
    await service.delete_product(product_id)
    return Envelope[None](success=True, message="Product deleted successfully")
