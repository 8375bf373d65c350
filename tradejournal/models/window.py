"""TimeWindow data model."""

from datetime import datetime, timedelta

from pydantic import BaseModel, Field, field_validator, model_validator

from tradejournal.models.trade import to_naive_utc


class TimeWindow(BaseModel):
    """A half-open time interval ``[start, end)``.

    Bounds are naive UTC, like trade timestamps, so aware and naive values
    can be compared.
    """

    start: datetime = Field(..., description="Inclusive start")
    end: datetime = Field(..., description="Exclusive end")

    model_config = {"frozen": True}

    @field_validator("start", "end")
    @classmethod
    def _normalize_bound(cls, value: datetime) -> datetime:
        return to_naive_utc(value)

    @model_validator(mode="after")
    def _check_order(self) -> "TimeWindow":
        if self.end <= self.start:
            raise ValueError("window end must be after its start")
        return self

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    def contains(self, moment: datetime) -> bool:
        return self.start <= to_naive_utc(moment) < self.end

    def overlaps(self, other: "TimeWindow") -> bool:
        return self.start < other.end and other.start < self.end

    def preceding(self) -> "TimeWindow":
        """Window of the same length that ends where this one starts."""
        return TimeWindow(start=self.start - self.length, end=self.start)
