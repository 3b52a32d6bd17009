"""
Transaction use cases - earnings and expenses with a monthly summary.

Category is derived from the type ("General Earning" / "General Expense")
and is re-derived whenever the type changes.
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy import func
from sqlalchemy.orm import Session

from lifeboard.domain.errors import ValidationError, NotFoundError
from lifeboard.infrastructure.db.models import TransactionModel
from lifeboard.utils.dates import month_bounds, parse_datetime, utcnow
from lifeboard.utils.validation import require_text, require_choice, validate_and_normalize_amount

logger = logging.getLogger(__name__)

TRANSACTION_TYPES = ("earning", "expense")


def category_for(transaction_type: str) -> str:
    return "General Earning" if transaction_type == "earning" else "General Expense"


def _month_filter(query, month, year):
    if month is not None and year is not None:
        start, end = month_bounds(int(year), int(month))
        query = query.filter(TransactionModel.date >= start, TransactionModel.date < end)
    return query


def _get_owned(db: Session, owner_id: int, transaction_id: int) -> TransactionModel:
    tx = db.query(TransactionModel).filter(
        TransactionModel.id == transaction_id,
        TransactionModel.owner_id == owner_id,
    ).first()
    if not tx:
        raise NotFoundError("Transaction not found")
    return tx


def serialize_transaction(tx: TransactionModel) -> Dict[str, Any]:
    return {
        "id": tx.id,
        "type": tx.type,
        "amount": str(tx.amount),
        "description": tx.description,
        "date": tx.date.isoformat() if tx.date else None,
        "category": tx.category,
        "completed": tx.completed,
        "created_at": tx.created_at.isoformat() if tx.created_at else None,
        "updated_at": tx.updated_at.isoformat() if tx.updated_at else None,
    }


class CreateTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, type: str, amount, description: str, date=None, completed: bool = False) -> TransactionModel:
        require_choice(type, TRANSACTION_TYPES, "transaction type")
        tx = TransactionModel(
            owner_id=owner_id,
            type=type,
            amount=validate_and_normalize_amount(amount),
            description=require_text(description, "Please add a description"),
            date=parse_datetime(date, "date") if date else utcnow(),
            category=category_for(type),
            completed=bool(completed),
        )
        self.db.add(tx)
        self.db.commit()
        logger.info("Transaction %s (%s %s) created for user %s", tx.id, type, tx.amount, owner_id)
        return tx


class UpdateTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, transaction_id: int, **changes) -> TransactionModel:
        tx = _get_owned(self.db, owner_id, transaction_id)

        if "type" in changes:
            tx.type = require_choice(changes["type"], TRANSACTION_TYPES, "transaction type")
            tx.category = category_for(tx.type)
        if "amount" in changes:
            tx.amount = validate_and_normalize_amount(changes["amount"])
        if "description" in changes:
            tx.description = require_text(changes["description"], "Please add a description")
        if "date" in changes:
            tx.date = parse_datetime(changes["date"], "date")
        if "completed" in changes:
            if not isinstance(changes["completed"], bool):
                raise ValidationError("Completed must be a boolean")
            tx.completed = changes["completed"]

        tx.updated_at = utcnow()
        self.db.commit()
        return tx


class DeleteTransactionUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, transaction_id: int) -> None:
        tx = _get_owned(self.db, owner_id, transaction_id)
        self.db.delete(tx)
        self.db.commit()
        logger.info("Transaction %s deleted by user %s", transaction_id, owner_id)


class TransactionsQuery:
    """Read side: списки и сводка по месяцу"""

    def __init__(self, db: Session):
        self.db = db

    def get(self, owner_id: int, transaction_id: int) -> TransactionModel:
        return _get_owned(self.db, owner_id, transaction_id)

    def list(self, owner_id: int, month=None, year=None, type: str | None = None) -> List[TransactionModel]:
        query = self.db.query(TransactionModel).filter(TransactionModel.owner_id == owner_id)
        query = _month_filter(query, month, year)
        if type:
            query = query.filter(TransactionModel.type == require_choice(type, TRANSACTION_TYPES, "transaction type"))
        return query.order_by(TransactionModel.date.desc(), TransactionModel.id.desc()).all()

    def summary(self, owner_id: int, month=None, year=None) -> Dict[str, Any]:
        """
        Сумма доходов и расходов (за месяц, если заданы month и year)

        Returns:
            {"earnings", "expenses", "balance", "transaction_count"}; суммы строками
        """
        query = self.db.query(
            TransactionModel.type,
            func.sum(TransactionModel.amount),
            func.count(TransactionModel.id),
        ).filter(TransactionModel.owner_id == owner_id)
        query = _month_filter(query, month, year)
        rows = query.group_by(TransactionModel.type).all()

        cents = Decimal("0.01")
        totals = {tx_type: (Decimal(str(total or 0)).quantize(cents), count) for tx_type, total, count in rows}
        earnings = totals.get("earning", (Decimal("0.00"), 0))[0]
        expenses = totals.get("expense", (Decimal("0.00"), 0))[0]
        return {
            "earnings": str(earnings),
            "expenses": str(expenses),
            "balance": str(earnings - expenses),
            "transaction_count": sum(count for _, count in totals.values()),
        }
