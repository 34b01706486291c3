"""Base schema config shared by API payloads."""

from typing import Literal

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """Serializes with camelCase keys (imagePath, createdAt) and reads ORM attributes."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class MessageResponse(BaseModel):
    """Plain acknowledgement body."""

    message: str


class HealthResponse(BaseModel):
    """Liveness plus database reachability, for load balancers."""

    status: Literal["ok"] = "ok"
    version: str
    environment: str
    database: Literal["connected", "disconnected"]
