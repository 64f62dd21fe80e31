"""Error response schemas."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorResponse(BaseModel):
    """Standard error response schema.

    Used for every domain rejection (4xx) and integrity failure (5xx).
    """

    error: str = Field(
        ...,
        description="Error type identifier",
        examples=["validation_error", "cycle_detected", "not_found"]
    )
    message: str = Field(
        ...,
        description="Human-readable error message",
        examples=["Supersession of A by B would create a cycle"]
    )
    details: Optional[dict] = Field(
        None,
        description="Additional error context (offending fields, referencing records, etc.)",
        examples=[{"title": "title is required and cannot be empty"}]
    )

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {
                    "error": "illegal_transition",
                    "message": "Cannot change a superseded decision"
                },
                {
                    "error": "validation_error",
                    "message": "Validation failed: context, rationale required and cannot be empty",
                    "details": {
                        "context": "context is required and cannot be empty",
                        "rationale": "rationale is required and cannot be empty"
                    }
                }
            ]
        }
    )
