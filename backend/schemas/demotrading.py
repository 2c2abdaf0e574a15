from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.demotrading import TradeSide


class DemoTradingRequest(BaseModel):
    """Body of ``POST /demotrading``.

    With no trade fields the call opens (or returns) the caller's account;
    with trade fields it records a transaction.
    """

    demotrading_id: int | None = None
    stock_symbol: str | None = Field(default=None, min_length=1, max_length=20)
    side: TradeSide | None = None
    quantity: int | None = Field(default=None, gt=0)
    price: float | None = Field(default=None, gt=0, allow_inf_nan=False)

    @field_validator("stock_symbol")
    @classmethod
    def normalize_symbol(cls, value: str | None) -> str | None:
        return value.strip().upper() if value is not None else None

    @field_validator("side", mode="before")
    @classmethod
    def normalize_side(cls, value):
        if isinstance(value, str):
            return value.strip().upper()
        return value

    def trade_fields(self) -> dict:
        return {
            "stock_symbol": self.stock_symbol,
            "side": self.side,
            "quantity": self.quantity,
            "price": self.price,
        }

    def is_trade(self) -> bool:
        return any(v is not None for v in self.trade_fields().values())


class DemoBalanceUpdate(BaseModel):
    current_balance: float = Field(ge=0, allow_inf_nan=False)


class DemoTransactionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    demotrading_id: int
    stock_symbol: str
    side: str
    quantity: int
    price: float
    created_at: datetime


class DemoAccountResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: int
    user_id: int
    current_balance: float
    created_at: datetime
    transactions: list[DemoTransactionResponse] = []
