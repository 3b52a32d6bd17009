"""
Transaction API endpoints
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.transactions import (
    CreateTransactionUseCase,
    UpdateTransactionUseCase,
    DeleteTransactionUseCase,
    TransactionsQuery,
    serialize_transaction,
)
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/transactions", tags=["transactions"])


# === Request models ===

class CreateTransactionRequest(RequestModel):
    type: str
    amount: str | int | float  # Decimal as string preferred
    description: str
    date: str | None = None
    completed: bool = False


class UpdateTransactionRequest(RequestModel):
    type: str | None = None
    amount: str | int | float | None = None
    description: str | None = None
    date: str | None = None
    completed: bool | None = None


# === Endpoints ===

@router.post("")
def create_transaction(
    req: CreateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Создать доход или расход (категория выводится из типа)"""
    tx = CreateTransactionUseCase(db).execute(
        owner_id=user.id,
        type=req.type,
        amount=req.amount,
        description=req.description,
        date=req.date,
        completed=req.completed,
    )
    return created(serialize_transaction(tx))


@router.get("")
def list_transactions(
    month: int | None = None,
    year: int | None = None,
    type: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    items = TransactionsQuery(db).list(user.id, month=month, year=year, type=type)
    return ok([serialize_transaction(tx) for tx in items], count=len(items))


@router.get("/summary")
def transactions_summary(
    month: int | None = None,
    year: int | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return ok(TransactionsQuery(db).summary(user.id, month=month, year=year))


@router.get("/{transaction_id}")
def get_transaction(transaction_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(serialize_transaction(TransactionsQuery(db).get(user.id, transaction_id)))


@router.put("/{transaction_id}")
def update_transaction(
    transaction_id: int,
    req: UpdateTransactionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    tx = UpdateTransactionUseCase(db).execute(user.id, transaction_id, **req.changes())
    return ok(serialize_transaction(tx))


@router.delete("/{transaction_id}")
def delete_transaction(transaction_id: int, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    DeleteTransactionUseCase(db).execute(user.id, transaction_id)
    return ok({})
