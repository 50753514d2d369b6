"""Shared schema base: snake_case in Python, camelCase on the wire."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    """Plain success acknowledgement."""

    success: bool = True
    message: str


class HealthResponse(ApiModel):
    status: Literal["ok", "degraded"]
    environment: str
    database: Literal["connected", "disconnected"]
    version: str
