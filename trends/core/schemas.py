from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field, field_validator
from pydantic.config import ConfigDict


# -------------------------
# Favorites
# -------------------------

Timeframe = Literal["1min", "5min", "15min", "day"]

TIMEFRAME_LABELS: Dict[str, str] = {
    "1min": "1 Minute",
    "5min": "5 Minutes",
    "15min": "15 Minutes",
    "day": "Daily",
}


class FavoriteQuery(BaseModel):
    """A saved chart query.

    Python attribute names are snake_case; the durable record uses the
    camelCase aliases (`stockSymbol1`, `startDate`, ...).
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    primary_symbol: str = Field(alias="stockSymbol1", min_length=1)
    secondary_symbol: Optional[str] = Field(default=None, alias="stockSymbol2")
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    timeframe: Timeframe

    @field_validator("secondary_symbol", mode="before")
    @classmethod
    def _blank_is_absent(cls, v: Any) -> Any:
        # Older records store "" for an unused second symbol.
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def symbols(self) -> List[str]:
        out = [self.primary_symbol]
        if self.secondary_symbol:
            out.append(self.secondary_symbol)
        return out

    def to_record(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# -------------------------
# Market Data
# -------------------------

class SymbolInfo(BaseModel):
    ticker: str
    name: str = ""


class Bar(BaseModel):
    symbol: str
    open: float
    high: float
    low: float
    close: float
    volume: float
    trade_count: Optional[int] = None
    timestamp: datetime

    @classmethod
    def from_alpaca(cls, symbol: str, raw: Dict[str, Any]) -> "Bar":
        """Alpaca sends compact keys: o/h/l/c/v/n/t."""
        return cls(
            symbol=symbol,
            open=raw["o"],
            high=raw["h"],
            low=raw["l"],
            close=raw["c"],
            volume=raw["v"],
            trade_count=raw.get("n"),
            timestamp=raw["t"],
        )


# -------------------------
# Errors
# -------------------------

class ErrorEnvelope(BaseModel):
    error: str
