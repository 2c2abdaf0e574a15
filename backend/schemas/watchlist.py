from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _normalize_symbol(value: str) -> str:
    value = value.strip().upper()
    if not value:
        raise ValueError("stock_symbol must not be empty")
    return value


class WatchlistAdd(BaseModel):
    stock_symbol: str = Field(min_length=1, max_length=20)
    target_price: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    notes: str | None = None

    @field_validator("stock_symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)


class WatchlistRemove(BaseModel):
    # Older clients send camelCase
    stock_symbol: str = Field(
        min_length=1,
        max_length=20,
        validation_alias=AliasChoices("stock_symbol", "stockSymbol"),
    )

    @field_validator("stock_symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)


class WatchlistUpdate(BaseModel):
    target_price: float | None = Field(default=None, gt=0, allow_inf_nan=False)
    notes: str | None = None


class WatchlistEntryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int
    stock_symbol: str
    target_price: float | None = None
    notes: str | None = None
    created_at: datetime


class WatchlistAlertResponse(BaseModel):
    stock_symbol: str
    target_price: float
    live_price: float | None = None
    target_reached: bool
    progress_percent: float | None = None
