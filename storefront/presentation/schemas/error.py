"""Error response schemas."""

from typing import Any, Literal

from pydantic import BaseModel, Field


class ErrorItem(BaseModel):
    """A single field-level problem."""

    field: str = Field(..., description="Dot path of the offending field")
    message: str = Field(..., description="Human-readable reason")


class ErrorResponse(BaseModel):
    """Uniform error envelope.

    ``stack``, ``error`` and ``request`` are only populated in development.
    ``retryAfter`` only accompanies 429 responses.
    """

    success: Literal[False] = False
    message: str = Field(..., description="Human-readable error message")
    errors: list[ErrorItem] | None = Field(None, description="Field-level problems")
    stack: str | None = Field(None, description="Traceback (development only)")
    error: dict[str, Any] | None = Field(None, description="Original exception (development only)")
    request: dict[str, Any] | None = Field(None, description="Request snapshot (development only)")
    retry_after: int | None = Field(
        None,
        serialization_alias="retryAfter",
        description="Seconds until the rate limit window resets",
    )

    model_config = {
        "json_schema_extra": {
            "examples": [
                {"success": False, "message": "Product not found"},
                {
                    "success": False,
                    "message": "Validation Error",
                    "errors": [
                        {"field": "price", "message": "Input should be greater than 0"},
                        {"field": "images", "message": '"images" is required'},
                    ],
                },
            ]
        }
    }
