from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.portfolio import TransactionType


def _normalize_symbol(value: str) -> str:
    value = value.strip().upper()
    if not value:
        raise ValueError("stock_symbol must not be empty")
    return value


class PortfolioBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str | None = None
    initial_balance: float = Field(default=0.0, ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Portfolio name is required")
        return value


class PortfolioCreate(PortfolioBase):
    pass


class PortfolioUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = None
    initial_balance: float | None = Field(default=None, ge=0, allow_inf_nan=False)

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str | None) -> str | None:
        if value is not None and not value.strip():
            raise ValueError("Portfolio name must not be blank")
        return value


class PortfolioResponse(PortfolioBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int
    current_balance: float
    created_at: datetime
    updated_at: datetime | None = None


class PortfolioSummaryResponse(PortfolioResponse):
    """Portfolio with stored-price aggregates (no live quotes)."""

    holdings_count: int = 0
    total_value: float = 0.0


class HoldingBase(BaseModel):
    stock_symbol: str = Field(min_length=1, max_length=20)
    quantity: int = Field(gt=0)
    average_price: float = Field(gt=0, allow_inf_nan=False)
    transaction_type: TransactionType = TransactionType.BUY
    cash_dividend: float = Field(default=0.0, ge=0, allow_inf_nan=False)
    right_share: int = Field(default=0, ge=0)
    bonus_share: int = Field(default=0, ge=0)
    other_note: str | None = None


class HoldingCreate(HoldingBase):
    portfolio_id: int

    @field_validator("stock_symbol")
    @classmethod
    def normalize_symbol(cls, value: str) -> str:
        return _normalize_symbol(value)

    @field_validator("transaction_type", mode="before")
    @classmethod
    def normalize_transaction_type(cls, value):
        if isinstance(value, str):
            return value.strip().capitalize()
        return value


class HoldingResponse(HoldingBase):
    model_config = ConfigDict(from_attributes=True)
    id: int
    portfolio_id: int
    transaction_type: str
    created_at: datetime


class PositionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    symbol: str
    bought_quantity: int
    sold_quantity: int
    net_quantity: int
    buy_cost: float
    sell_proceeds: float
    live_price: float | None = None
    market_value: float | None = None


class DividendSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    total_cash: float
    total_bonus_shares: float
    total_right_shares: float
    cash_count: int
    bonus_count: int
    right_count: int


class PortfolioValuationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    portfolio_id: int
    total_investment: float
    total_disposed: float
    net_investment: float
    current_value: float
    profit_loss: float
    profit_loss_percent: float
    holdings_count: int
    positions: list[PositionResponse] = []
    dividends: DividendSummaryResponse
    live_prices: bool
    valued_at: datetime
