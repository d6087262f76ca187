"""
Catalog API: Custom Exception Hierarchy
=========================================

What:  Application-specific exceptions for every failure the API can report.
How:   Each exception carries a client-safe message and an optional context
       dict. Global handlers registered in main.py catch them and return the
       standard JSON envelope with the matching HTTP status code.
Who:   Raised by repositories, services and routes.

Exception Hierarchy:
    CatalogError (base)
    ├── ValidationError          → 400 Bad Request
    ├── CategoryReferenceError   → 400 Bad Request (product points at a missing category)
    ├── NotFoundError            → 404 Not Found
    ├── MethodNotAllowedError    → 405 Method Not Allowed
    ├── NameConflictError        → 409 Conflict
    └── DatabaseError            → 500 Internal Server Error

Repositories raise NotFoundError, NameConflictError and CategoryReferenceError
as distinguished kinds; anything else coming out of the storage driver is
wrapped in DatabaseError and reported with a generic message.
"""

from typing import Any, Dict, Optional


class CatalogError(Exception):
    """
    Base exception for all catalog application errors.

    Attributes:
        message:  Client-facing description (returned in the envelope)
        context:  Debug details (logged server-side, never returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(CatalogError):
    """
    Raised when client input fails validation.

    When:    Malformed body, missing name, negative price/stock, bad id syntax.
    HTTP:    400 Bad Request
    """

    status_code = 400

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class CategoryReferenceError(CatalogError):
    """
    Raised when a product references a category id that does not exist.

    HTTP:    400 Bad Request (the request body is wrong, the URL is fine)
    """

    status_code = 400

    def __init__(
        self,
        category_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if category_id is not None:
            ctx["category_id"] = category_id
        super().__init__(message="Category not found", context=ctx)
        self.category_id = category_id


class NotFoundError(CatalogError):
    """
    Raised when the entity addressed by the URL does not exist.

    HTTP:    404 Not Found
    Message: "<Resource> not found", e.g. "Product not found".
    """

    status_code = 404

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[int] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id is not None:
            ctx["resource_id"] = resource_id
        super().__init__(message=f"{resource.capitalize()} not found", context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class MethodNotAllowedError(CatalogError):
    """Raised when the HTTP method is not supported on the given path shape."""

    status_code = 405

    def __init__(self, context: Optional[Dict[str, Any]] = None):
        super().__init__(message="Method not allowed", context=context)


class NameConflictError(CatalogError):
    """
    Raised when a create or update would duplicate a unique name.

    HTTP:    409 Conflict
    Message: "<Resource> name already exists".

    The SQL schema declares UNIQUE(name) as well; an IntegrityError that slips
    past the application pre-check is translated into this same error.
    """

    status_code = 409

    def __init__(
        self,
        resource: str = "resource",
        name: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx["resource"] = resource
        if name is not None:
            ctx["name"] = name
        super().__init__(
            message=f"{resource.capitalize()} name already exists", context=ctx
        )
        self.resource = resource


class DatabaseError(CatalogError):
    """
    Raised when a storage operation fails unexpectedly.

    HTTP:    500 Internal Server Error

    The message is a generic per-operation text such as
    "Failed to create product". Driver errors, SQL text and constraint names
    go into context and are only logged.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)
