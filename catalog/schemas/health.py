"""Catalog API: health check response schema."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """
    Returned by GET /health for monitoring and load balancer probes.

    database is "connected" / "disconnected" for the SQL store and
    "not_applicable" for the in-memory store.
    """
    status: str = Field(description="Overall service status: healthy, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Active store backend: sql or memory")
    database: str = Field(description="Database connectivity")
    uptime_seconds: float = Field(description="Seconds since service started")
