"""
Catalog API: Route Dependencies
=================================

What:  Small FastAPI dependencies shared by the resource routers.

    get_category_service / get_product_service
        Pull the services create_app() stored on app.state.
    parse_id(raw, message)
        The path segment after the resource prefix must be a positive integer.
    json_body(model)
        Decode and type-check the request body. Any failure (bad JSON, empty
        body, wrong field types) is a 400 "Invalid request body". Business
        checks (name, price, stock) are left to the services.

Dependencies resolve in declaration order, so a route that takes the id
before the body reports a bad id before it looks at the body.
"""

import re
from typing import Awaitable, Callable, Optional, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from catalog.exceptions import MethodNotAllowedError, ValidationError
from catalog.schemas.product import INT64_MAX
from catalog.services.category_service import CategoryService
from catalog.services.product_service import ProductService

ModelT = TypeVar("ModelT", bound=BaseModel)

# ASCII digits only; \d would also take other scripts' digits
_DIGITS = re.compile(r"\+?[0-9]+")
_SIGNED_DIGITS = re.compile(r"[+-]?[0-9]+")

# ids are BIGINT in the SQL store; anything larger cannot exist
MAX_ID = INT64_MAX


def get_category_service(request: Request) -> CategoryService:
    return request.app.state.category_service


def get_product_service(request: Request) -> ProductService:
    return request.app.state.product_service


def parse_id(raw: str, message: str) -> int:
    """
    Parse the id segment of /<resource>/<id>.

    An empty segment (e.g. PUT /categories/) is the collection path, where
    only GET and POST exist, so it is reported as 405 rather than as a bad id.
    fullmatch, not match: "$" would let a trailing newline through.
    """
    if raw == "":
        raise MethodNotAllowedError()
    if not _DIGITS.fullmatch(raw):
        raise ValidationError(message=message, context={"raw_id": raw})
    value = int(raw)
    if value <= 0 or value > MAX_ID:
        raise ValidationError(message=message, context={"raw_id": raw})
    return value


def parse_optional_int(raw: Optional[str], message: str) -> Optional[int]:
    """Parse an optional integer query parameter; empty counts as absent."""
    if raw is None or raw == "":
        return None
    if not _SIGNED_DIGITS.fullmatch(raw):
        raise ValidationError(message=message, context={"raw_value": raw})
    value = int(raw)
    if abs(value) > MAX_ID:
        raise ValidationError(message=message, context={"raw_value": raw})
    return value


def json_body(model: Type[ModelT]) -> Callable[[Request], Awaitable[ModelT]]:
    async def decode(request: Request) -> ModelT:
        try:
            raw = await request.json()
            return model.model_validate(raw)
        except (ValueError, PydanticValidationError) as e:
            raise ValidationError(
                message="Invalid request body",
                context={"error_type": type(e).__name__},
            ) from e

    decode.__name__ = f"decode_{model.__name__}"
    return decode
