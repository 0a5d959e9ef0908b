"""Health check schemas."""

from pydantic import BaseModel, ConfigDict, Field


class ServicesStatus(BaseModel):
    """Status of dependent services."""

    database: str = Field(description="Database reachability")
    storage: str = Field(description="Configured image store provider")


class HealthCheckResponse(BaseModel):
    """Health check response model."""

    model_config = ConfigDict(ser_json_timedelta="iso8601", ser_json_bytes="utf8")

    version: str = Field(description="API version")
    status: str = Field(description="Overall health status")
    timestamp: str = Field(description="Current timestamp")
    services: ServicesStatus = Field(description="Status of dependent services")
