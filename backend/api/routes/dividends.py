"""Dividend API routes."""

from fastapi import APIRouter, Query, status

from api.deps import CurrentUser, DbSession
from schemas.base import ApiResponse, ok
from schemas.dividend import DividendCreate, DividendResponse
from services.dividends import DividendService

router = APIRouter()


@router.get("", response_model=ApiResponse[list[DividendResponse]])
async def list_dividends(portfolio_id: int, user: CurrentUser, db: DbSession):
    dividends = await DividendService(db).list_dividends(user.id, portfolio_id)
    return ok([DividendResponse.model_validate(d) for d in dividends])


@router.post(
    "",
    response_model=ApiResponse[DividendResponse],
    status_code=status.HTTP_201_CREATED,
)
async def add_dividend(body: DividendCreate, user: CurrentUser, db: DbSession):
    """Record a cash, bonus or right dividend against a holding symbol."""
    dividend = await DividendService(db).add_dividend(
        user.id,
        body.portfolio_id,
        stock_symbol=body.stock_symbol,
        type=body.type,
        value=body.value,
        date=body.date,
        notes=body.notes,
    )
    return ok(DividendResponse.model_validate(dividend), message="Dividend added")


@router.delete("", response_model=ApiResponse)
async def delete_dividend(
    user: CurrentUser,
    db: DbSession,
    dividend_id: int = Query(alias="id"),
):
    await DividendService(db).delete_dividend(user.id, dividend_id)
    return ok(message="Dividend deleted")
