"""
Catalog API: Response Envelope
================================

Every endpoint, success or failure, answers with the same JSON shape:

    {"success": true,  "message": "Products retrieved successfully", "data": [...]}
    {"success": false, "message": "Product not found"}

`data` is left out when there is nothing to return (errors, deletes). Routes
declare `response_model_exclude_none=True` so absent values disappear from the
output; an empty list is not None and is still serialized as [].
"""

from typing import Any, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

DataT = TypeVar("DataT")


class Envelope(BaseModel, Generic[DataT]):
    """Uniform success/message/data wrapper."""

    success: bool = Field(description="Whether the request succeeded")
    message: str = Field(description="Human-readable outcome")
    data: Optional[DataT] = Field(default=None, description="Payload, when any")


def error_body(message: str) -> Dict[str, Any]:
    """JSON content for an error envelope (used by the exception handlers)."""
    return Envelope[None](success=False, message=message).model_dump(exclude_none=True)
