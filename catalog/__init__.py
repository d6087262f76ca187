"""
Catalog API
=============

Small product catalog service: categories and products with CRUD over
HTTP/JSON, backed by PostgreSQL (async SQLAlchemy) or an in-process store.

Packages:
    models/        SQLAlchemy table classes
    schemas/       pydantic request/response models
    repositories/  storage interfaces and their SQL / in-memory versions
    services/      input validation and orchestration
    routes/        FastAPI routers
    middleware/    request id and access logging
"""

__version__ = "1.0.0"
