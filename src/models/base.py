"""Shared Pydantic base model and response fragments for the API schemas."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class LunaBase(BaseModel):
    """Base model for every Luna Flow schema.

    ``from_attributes`` lets routers validate engine dataclasses directly.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class TimestampMixin(LunaBase):
    """First and most recent write, stamped by the engine."""

    created_at: datetime
    updated_at: datetime


class ErrorDetail(BaseModel):
    """Body of 4xx responses raised through ``HTTPException``."""

    detail: str
