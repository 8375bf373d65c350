"""Trade data model."""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from tradejournal.exceptions import TradeStateError

TradeSide = Literal["BUY", "SELL"]
TradeStatus = Literal["OPEN", "CLOSED", "CANCELLED"]


def to_decimal(value):
    """Convert floats through their shortest repr so 0.1 stays 0.1."""
    if isinstance(value, float):
        return Decimal(repr(value))
    return value


def to_naive_utc(value):
    """Convert timezone-aware datetimes to naive UTC; naive ones pass through."""
    if isinstance(value, datetime) and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# Characters that would split a symbol across CSV fields or lines.
SYMBOL_FORBIDDEN = (",", "\r", "\n")


class Trade(BaseModel):
    """Represents a single journaled trade."""

    id: Optional[int] = Field(default=None, description="Database ID")
    owner_id: str = Field(default="default", description="Owning user")
    symbol: str = Field(..., min_length=1, description="Trading symbol")
    side: TradeSide = Field(..., description="Trade side (BUY/SELL)")
    strategy: Optional[str] = Field(
        default=None, max_length=100, description="Strategy name"
    )
    entry_date: datetime = Field(..., description="Entry timestamp")
    entry_price: Decimal = Field(..., ge=0, description="Entry price")
    quantity: Decimal = Field(..., gt=0, description="Position size")
    exit_date: Optional[datetime] = Field(default=None, description="Exit timestamp")
    exit_price: Optional[Decimal] = Field(default=None, ge=0, description="Exit price")
    status: TradeStatus = Field(default="OPEN", description="Trade status")
    commission: Decimal = Field(default=Decimal("0"), ge=0, description="Commission paid")
    fees: Decimal = Field(default=Decimal("0"), ge=0, description="Other fees paid")
    manual_profit: Optional[Decimal] = Field(
        default=None, description="User-entered profit, used when auto calculation is off"
    )
    stop_loss: Optional[Decimal] = Field(default=None, ge=0, description="Stop loss price")
    take_profit: Optional[Decimal] = Field(default=None, ge=0, description="Take profit price")
    notes: Optional[str] = Field(default=None, max_length=1000, description="User notes")
    tags: list[str] = Field(default_factory=list, description="Free-form tags")

    model_config = {"frozen": True}

    @field_validator(
        "entry_price",
        "quantity",
        "exit_price",
        "commission",
        "fees",
        "manual_profit",
        "stop_loss",
        "take_profit",
        mode="before",
    )
    @classmethod
    def _coerce_decimal(cls, value):
        return to_decimal(value)

    @field_validator("symbol")
    @classmethod
    def _normalize_symbol(cls, value: str) -> str:
        symbol = value.strip().upper()
        if not symbol:
            raise ValueError("symbol must not be blank")
        if any(char in symbol for char in SYMBOL_FORBIDDEN):
            raise ValueError("symbol must not contain commas or line breaks")
        return symbol

    @field_validator("entry_date", "exit_date")
    @classmethod
    def _normalize_timestamp(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_naive_utc(value)

    @field_validator("strategy")
    @classmethod
    def _strip_strategy(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None

    @field_validator("tags")
    @classmethod
    def _check_tags(cls, value: list[str]) -> list[str]:
        tags = [tag.strip() for tag in value if tag.strip()]
        for tag in tags:
            if len(tag) > 50:
                raise ValueError(f"tag '{tag[:10]}...' exceeds 50 characters")
        return tags

    @model_validator(mode="after")
    def _check_exit_fields(self) -> "Trade":
        if (self.exit_date is None) != (self.exit_price is None):
            raise ValueError("exit_date and exit_price must be given together")
        if self.status == "CLOSED" and self.exit_price is None:
            raise ValueError("a CLOSED trade requires exit_date and exit_price")
        return self

    @property
    def entry_value(self) -> Decimal:
        """Notional value at entry (price x quantity)."""
        return self.entry_price * self.quantity

    @property
    def costs(self) -> Decimal:
        """Commission plus fees."""
        return self.commission + self.fees

    def close(self, exit_price, exit_date: Optional[datetime] = None) -> "Trade":
        """Return a CLOSED copy of this trade.

        Args:
            exit_price: Price the position was closed at.
            exit_date: Exit timestamp. Defaults to now.

        Raises:
            TradeStateError: If the trade is not OPEN.
        """
        if self.status != "OPEN":
            raise TradeStateError(
                f"Only OPEN trades can be closed (trade is {self.status})"
            )
        data = self.model_dump()
        data.update(
            exit_price=exit_price,
            exit_date=exit_date or datetime.now(),
            status="CLOSED",
        )
        return Trade(**data)

    def cancel(self) -> "Trade":
        """Return a CANCELLED copy of this trade."""
        if self.status != "OPEN":
            raise TradeStateError(
                f"Only OPEN trades can be cancelled (trade is {self.status})"
            )
        return Trade(**{**self.model_dump(), "status": "CANCELLED"})
