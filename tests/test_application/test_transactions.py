"""Tests for transaction use cases and monthly summary."""
import pytest
from decimal import Decimal

from lifeboard.application.transactions import (
    CreateTransactionUseCase, UpdateTransactionUseCase, DeleteTransactionUseCase,
    TransactionsQuery, serialize_transaction,
)
from lifeboard.domain.errors import ValidationError, NotFoundError

ACCOUNT = 1
OTHER = 2


def _create(db_session, type="earning", amount="100", description="Salary", date="2025-01-15", **kwargs):
    return CreateTransactionUseCase(db_session).execute(
        ACCOUNT, type=type, amount=amount, description=description, date=date, **kwargs,
    )


class TestCreateTransaction:
    def test_category_derived_from_type(self, db_session):
        earning = _create(db_session)
        expense = _create(db_session, type="expense", description="Rent")

        assert earning.category == "General Earning"
        assert expense.category == "General Expense"

    def test_amount_normalized(self, db_session):
        tx = _create(db_session, amount="100,50")
        assert serialize_transaction(tx)["amount"] == "100.50"
        assert tx.amount == Decimal("100.50")

    @pytest.mark.parametrize("amount", ["-5", "1.005", "abc"])
    def test_invalid_amount(self, db_session, amount):
        with pytest.raises(ValidationError):
            _create(db_session, amount=amount)

    def test_invalid_type(self, db_session):
        with pytest.raises(ValidationError, match="transaction type"):
            _create(db_session, type="gift")

    def test_description_required(self, db_session):
        with pytest.raises(ValidationError, match="Please add a description"):
            _create(db_session, description="  ")


class TestUpdateTransaction:
    def test_type_change_rederives_category(self, db_session):
        tx = _create(db_session)
        UpdateTransactionUseCase(db_session).execute(ACCOUNT, tx.id, type="expense")

        stored = TransactionsQuery(db_session).get(ACCOUNT, tx.id)
        assert stored.type == "expense"
        assert stored.category == "General Expense"

    def test_completed_must_be_boolean(self, db_session):
        tx = _create(db_session)
        with pytest.raises(ValidationError, match="boolean"):
            UpdateTransactionUseCase(db_session).execute(ACCOUNT, tx.id, completed="yes")

    def test_other_owner_not_found(self, db_session):
        tx = _create(db_session)
        with pytest.raises(NotFoundError, match="Transaction not found"):
            UpdateTransactionUseCase(db_session).execute(OTHER, tx.id, amount="1")

    def test_delete(self, db_session):
        tx = _create(db_session)
        DeleteTransactionUseCase(db_session).execute(ACCOUNT, tx.id)
        with pytest.raises(NotFoundError):
            TransactionsQuery(db_session).get(ACCOUNT, tx.id)


class TestTransactionsQuery:
    def test_list_newest_first_and_filters(self, db_session):
        jan = _create(db_session, date="2025-01-15")
        feb = _create(db_session, type="expense", description="Food", date="2025-02-03")

        query = TransactionsQuery(db_session)
        assert [t.id for t in query.list(ACCOUNT)] == [feb.id, jan.id]
        assert [t.id for t in query.list(ACCOUNT, month=1, year=2025)] == [jan.id]
        assert [t.id for t in query.list(ACCOUNT, type="expense")] == [feb.id]

    def test_summary(self, db_session):
        _create(db_session, amount="1000")
        _create(db_session, amount="250.50")
        _create(db_session, type="expense", amount="300", description="Rent")
        _create(db_session, type="expense", amount="50", description="Old", date="2024-12-31")

        summary = TransactionsQuery(db_session).summary(ACCOUNT, month=1, year=2025)

        assert summary == {
            "earnings": "1250.50",
            "expenses": "300.00",
            "balance": "950.50",
            "transaction_count": 3,
        }

    def test_summary_empty(self, db_session):
        summary = TransactionsQuery(db_session).summary(ACCOUNT)
        assert summary["balance"] == "0.00"
        assert summary["transaction_count"] == 0
