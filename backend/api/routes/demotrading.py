"""Demo trading API routes: a paper-trading account with a trade journal."""

from fastapi import APIRouter, Query, Response, status

from api.deps import AppSettings, CurrentUser, DbSession
from errors import ValidationError
from schemas.base import ApiResponse, ok
from schemas.demotrading import (
    DemoAccountResponse,
    DemoBalanceUpdate,
    DemoTradingRequest,
    DemoTransactionResponse,
)
from services.demotrading import DemoTradingService

router = APIRouter()


async def _account_response(service: DemoTradingService, account) -> DemoAccountResponse:
    transactions = await service.list_transactions(account.user_id)
    return DemoAccountResponse(
        id=account.id,
        user_id=account.user_id,
        current_balance=account.current_balance,
        created_at=account.created_at,
        transactions=[DemoTransactionResponse.model_validate(t) for t in transactions],
    )


@router.get("", response_model=ApiResponse[DemoAccountResponse])
async def get_account(user: CurrentUser, db: DbSession, settings: AppSettings):
    """Return the caller's account and journal, opening the account on first access."""
    service = DemoTradingService(db, starting_balance=settings.DEMO_STARTING_BALANCE)
    account, _ = await service.get_or_create_account(user.id)
    return ok(await _account_response(service, account))


@router.post("", status_code=status.HTTP_201_CREATED)
async def post_demotrading(
    body: DemoTradingRequest,
    response: Response,
    user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
):
    """Record a trade, or open the account when the body carries no trade fields.

    Opening an account that already exists returns it with 200.
    """
    service = DemoTradingService(db, starting_balance=settings.DEMO_STARTING_BALANCE)

    if body.is_trade():
        missing = [name for name, value in body.trade_fields().items() if value is None]
        if missing:
            raise ValidationError(
                f"Missing trade fields: {', '.join(missing)}", field=missing[0]
            )
        transaction = await service.record_transaction(
            user.id,
            stock_symbol=body.stock_symbol,
            side=body.side.value,
            quantity=body.quantity,
            price=body.price,
            account_id=body.demotrading_id,
        )
        return ok(
            DemoTransactionResponse.model_validate(transaction).model_dump(mode="json"),
            message="Transaction recorded",
        )

    account, created = await service.get_or_create_account(user.id)
    if not created:
        response.status_code = status.HTTP_200_OK
    data = await _account_response(service, account)
    return ok(data.model_dump(mode="json"))


@router.put("", response_model=ApiResponse[DemoAccountResponse])
async def update_balance(
    body: DemoBalanceUpdate,
    user: CurrentUser,
    db: DbSession,
    settings: AppSettings,
):
    service = DemoTradingService(db, starting_balance=settings.DEMO_STARTING_BALANCE)
    account = await service.update_balance(user.id, body.current_balance)
    return ok(await _account_response(service, account), message="Balance updated")


@router.delete("", response_model=ApiResponse)
async def delete_transaction(
    user: CurrentUser,
    db: DbSession,
    transaction_id: int = Query(alias="id"),
):
    await DemoTradingService(db).delete_transaction(user.id, transaction_id)
    return ok(message="Transaction deleted")
