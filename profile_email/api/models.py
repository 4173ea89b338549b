"""
API request and response models.

Pydantic models and constraints for FastAPI endpoint validation and
OpenAPI schema generation.
"""

from pydantic import BaseModel

# ULID token id + ":" + 12 random bytes in hex
TOKEN_PATTERN = r"^[A-Za-z0-9]{26}:[A-Fa-f0-9]{24}$"


class HealthResponse(BaseModel):
    """Response model for the health check."""

    status: str
