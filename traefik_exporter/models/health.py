"""
Health Model — Pydantic schema for the Traefik /health payload.

Only the fields the exporter republishes are declared. Everything else
Traefik reports (pid, human-readable uptime, unixtime, ...) is ignored.

## Payload Format

{
    "uptime_sec": 1234.5,
    "status_code_count": {"200": 3},
    "total_status_code_count": {"200": 1200, "404": 7},
    "total_response_time_sec": 12.3,
    "average_response_time_sec": 0.0102
}
"""

from __future__ import annotations

from typing import Any, Dict

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class HealthRecord(BaseModel):
    """One decoded scrape of the Traefik health endpoint."""

    model_config = ConfigDict(
        strict=True,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )

    uptime_seconds: float = Field(0.0, alias="uptime_sec")
    status_code_current_counts: Dict[str, float] = Field(
        default_factory=dict, alias="status_code_count"
    )
    status_code_total_counts: Dict[str, float] = Field(
        default_factory=dict, alias="total_status_code_count"
    )
    total_response_time_seconds: float = Field(0.0, alias="total_response_time_sec")
    average_response_time_seconds: float = Field(0.0, alias="average_response_time_sec")

    @field_validator("*", mode="before")
    @classmethod
    def _null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        # Traefik emits null for maps it has not populated yet
        if value is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        if isinstance(value, dict):
            return {code: 0.0 if count is None else count for code, count in value.items()}
        return value
