"""
Alert models

- Alert: User-configured price threshold (stored by an external collaborator)
- AlertNotice: Advisory emitted by the alert evaluator for one render pass
"""

from datetime import datetime, timedelta
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.timestamps import ensure_utc


class Alert(BaseModel):
    """
    Price threshold alert

    Delivery and "already fired" bookkeeping live outside the engine; the
    engine only reads last_triggered_at to honour the cooldown.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str | None = Field(default=None, description="Storage identifier")
    threshold_value: float = Field(alias="thresholdValue", description="Price threshold ($/MWh)")
    condition: Literal["above", "below"] = Field(description="Crossing direction")
    is_active: bool = Field(default=True, alias="isActive")
    cooldown_minutes: int = Field(default=0, ge=0, alias="cooldownMinutes")
    last_triggered_at: datetime | None = Field(default=None, alias="lastTriggeredAt")

    @field_validator("last_triggered_at")
    @classmethod
    def naive_is_utc(cls, v):
        """Stored timestamps without an offset are UTC"""
        return ensure_utc(v) if v is not None else None

    def is_crossed_by(self, price: float) -> bool:
        """Check whether a price crosses the threshold in the configured direction"""
        if self.condition == "above":
            return price > self.threshold_value
        return price < self.threshold_value

    def in_cooldown(self, now: datetime) -> bool:
        """True while the last trigger is younger than cooldown_minutes"""
        if not self.cooldown_minutes or self.last_triggered_at is None:
            return False
        return ensure_utc(now) - self.last_triggered_at < timedelta(minutes=self.cooldown_minutes)


class AlertNotice(BaseModel):
    """Advisory message surfaced to the presentation layer"""

    model_config = ConfigDict(frozen=True)

    kind: Literal["spike", "negative_price", "optimal_timing", "volatility", "threshold"]
    severity: Literal["info", "warning", "critical"]
    message: str
    timestamp: datetime | None = Field(default=None, description="Time of the referenced point")
    value: float | None = Field(default=None, description="Referenced price or metric")
    hours_until: float | None = Field(default=None, description="Hours from now to timestamp")
    alert_id: str | None = Field(default=None, description="Source alert for threshold notices")
