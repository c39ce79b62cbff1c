"""
Base pydantic models shared by the streambench schemas.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict

__all__ = ["StandardBaseModel"]


class StandardBaseModel(BaseModel):
    """
    Base pydantic model with the project's standard configuration.

    Unknown fields are ignored, enum values are stored as their values, and
    models can be built from arbitrary attribute holders.
    """

    model_config = ConfigDict(
        extra="ignore",
        use_enum_values=True,
        from_attributes=True,
    )
