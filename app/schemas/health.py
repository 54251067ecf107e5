"""Schema for the health check payload."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Service status, environment and database reachability."""

    status: Literal["ok"] = "ok"
    version: str = Field(description="Running API version")
    environment: Literal["dev", "prod"]
    database: Literal["connected", "disconnected"]
