"""
Catalog API: Category Route Handlers
======================================

What:  /categories collection and /categories/{id} item endpoints.
How:   Thin handlers. The id and body are resolved by dependencies
       (catalog.routes.deps), CategoryService validates and calls the
       repository, and the result is wrapped in the standard envelope.
       Errors are raised and turned into envelopes by the global handlers.

    GET    /categories        list
    POST   /categories        create (201)
    GET    /categories/{id}   get one
    PUT    /categories/{id}   update
    DELETE /categories/{id}   delete

The item routes capture everything after the prefix (`:path`), so
/categories/abc and /categories/1/x both reach parse_id and come back as
400 "Invalid category ID". Other methods get a 405 envelope.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends, Path

from catalog.schemas.category import Category, CategoryInput
from catalog.schemas.envelope import Envelope
from catalog.services.category_service import CategoryService
from catalog.routes.deps import get_category_service, json_body, parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/categories", tags=["Categories"])

category_body = json_body(CategoryInput)


def category_id_path(
    category_id: str = Path(description="Positive integer category id"),
) -> int:
    return parse_id(category_id, "Invalid category ID")


@router.get(
    "",
    response_model=Envelope[List[Category]],
    response_model_exclude_none=True,
    summary="List all categories",
)
@router.get(
    "/",
    response_model=Envelope[List[Category]],
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def list_categories(
    service: CategoryService = Depends(get_category_service),
) -> Envelope[List[Category]]:
    categories = await service.list_categories()
    return Envelope[List[Category]](
        success=True,
        message="Categories retrieved successfully",
        data=categories,
    )


@router.post(
    "",
    status_code=201,
    response_model=Envelope[Category],
    response_model_exclude_none=True,
    summary="Create a category",
)
@router.post(
    "/",
    status_code=201,
    response_model=Envelope[Category],
    response_model_exclude_none=True,
    include_in_schema=False,
)
async def create_category(
    payload: CategoryInput = Depends(category_body),
    service: CategoryService = Depends(get_category_service),
) -> Envelope[Category]:
    category = await service.create_category(payload)
    return Envelope[Category](
        success=True,
        message="Category created successfully",
        data=category,
    )


@router.get(
    "/{category_id:path}",
    response_model=Envelope[Category],
    response_model_exclude_none=True,
    summary="Get a category by id",
)
async def get_category(
    category_id: int = Depends(category_id_path),
    service: CategoryService = Depends(get_category_service),
) -> Envelope[Category]:
    category = await service.get_category(category_id)
    return Envelope[Category](
        success=True,
        message="Category retrieved successfully",
        data=category,
    )


@router.put(
    "/{category_id:path}",
    response_model=Envelope[Category],
    response_model_exclude_none=True,
    summary="Update a category",
)
async def update_category(
    category_id: int = Depends(category_id_path),
    payload: CategoryInput = Depends(category_body),
    service: CategoryService = Depends(get_category_service),
) -> Envelope[Category]:
    category = await service.update_category(category_id, payload)
    return Envelope[Category](
        success=True,
        message="Category updated successfully",
        data=category,
    )


@router.delete(
    "/{category_id:path}",
    response_model=Envelope[None],
    response_model_exclude_none=True,
    summary="Delete a category",
)
async def delete_category(
    category_id: int = Depends(category_id_path),
    service: CategoryService = Depends(get_category_service),
) -> Envelope[None]:
    await service.delete_category(category_id)
    return Envelope[None](success=True, message="Category deleted successfully")
