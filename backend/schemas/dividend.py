from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.dividend import DividendType


class DividendCreate(BaseModel):
    portfolio_id: int
    stock_symbol: str = Field(min_length=1, max_length=20)
    type: str
    value: float = Field(gt=0, allow_inf_nan=False)
    date: date
    notes: str | None = None

    @field_validator("stock_symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        value = value.strip().upper()
        if not value:
            raise ValueError("stock_symbol must not be empty")
        return value

    @field_validator("type")
    @classmethod
    def known_type(cls, value: str) -> str:
        # Keep the caller's casing; comparisons elsewhere are case-insensitive
        value = value.strip()
        if value.lower() not in {t.value for t in DividendType}:
            raise ValueError("type must be one of Cash, Bonus, Right")
        return value


class DividendResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    portfolio_id: int
    stock_symbol: str
    type: str
    value: float
    date: date
    notes: str | None = None
    created_at: datetime
