"""
Life plan use cases - goals for an age interval with a target year.
"""
import logging
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from lifeboard.domain.errors import ValidationError, NotFoundError
from lifeboard.infrastructure.db.models import LifePlanModel
from lifeboard.utils.dates import utcnow
from lifeboard.utils.validation import require_text

logger = logging.getLogger(__name__)

MIN_START_AGE = 18
MIN_END_AGE = 19
MAX_AGE = 100
MIN_TARGET_YEAR = 2024
DESCRIPTION_MAX = 1000


def _int_field(value, message: str) -> int:
    if value is None or value == "":
        raise ValidationError(message)
    if isinstance(value, bool):
        raise ValidationError(message)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(message) from None


def _validate_plan(start_age: int, end_age: int, target_year: int) -> None:
    if start_age < MIN_START_AGE:
        raise ValidationError(f"Start age must be at least {MIN_START_AGE}")
    if start_age > MAX_AGE:
        raise ValidationError(f"Start age cannot be more than {MAX_AGE}")
    if end_age < MIN_END_AGE:
        raise ValidationError("End age must be at least 1 year after start age")
    if end_age > MAX_AGE:
        raise ValidationError(f"End age cannot be more than {MAX_AGE}")
    if start_age >= end_age:
        raise ValidationError("End age must be greater than start age")
    if target_year < MIN_TARGET_YEAR:
        raise ValidationError("Target year must be in the future")


def _get_owned(db: Session, owner_id: int, plan_id: int) -> LifePlanModel:
    plan = db.query(LifePlanModel).filter(
        LifePlanModel.id == plan_id,
        LifePlanModel.owner_id == owner_id,
    ).first()
    if not plan:
        raise NotFoundError("Plan not found")
    return plan


def serialize_plan(plan: LifePlanModel) -> Dict[str, Any]:
    return {
        "id": plan.id,
        "start_age": plan.start_age,
        "end_age": plan.end_age,
        "target_year": plan.target_year,
        "description": plan.description,
        "created_at": plan.created_at.isoformat() if plan.created_at else None,
        "updated_at": plan.updated_at.isoformat() if plan.updated_at else None,
    }


class CreateLifePlanUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, start_age, end_age, target_year, description: str) -> LifePlanModel:
        start_age = _int_field(start_age, "Please add a start age")
        end_age = _int_field(end_age, "Please add an end age")
        target_year = _int_field(target_year, "Please add a target year")
        _validate_plan(start_age, end_age, target_year)

        plan = LifePlanModel(
            owner_id=owner_id,
            start_age=start_age,
            end_age=end_age,
            target_year=target_year,
            description=require_text(description, "Please add a description", DESCRIPTION_MAX, "Description"),
        )
        self.db.add(plan)
        self.db.commit()
        logger.info("Life plan %s created for user %s", plan.id, owner_id)
        return plan


class UpdateLifePlanUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, plan_id: int, **changes) -> LifePlanModel:
        """Частичное обновление; итоговое сочетание возрастов проверяется целиком"""
        plan = _get_owned(self.db, owner_id, plan_id)

        start_age = _int_field(changes["start_age"], "Please add a start age") if "start_age" in changes else plan.start_age
        end_age = _int_field(changes["end_age"], "Please add an end age") if "end_age" in changes else plan.end_age
        target_year = (
            _int_field(changes["target_year"], "Please add a target year")
            if "target_year" in changes else plan.target_year
        )
        _validate_plan(start_age, end_age, target_year)

        if "description" in changes:
            plan.description = require_text(
                changes["description"], "Please add a description", DESCRIPTION_MAX, "Description"
            )
        plan.start_age = start_age
        plan.end_age = end_age
        plan.target_year = target_year
        plan.updated_at = utcnow()
        self.db.commit()
        return plan


class DeleteLifePlanUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, plan_id: int) -> None:
        plan = _get_owned(self.db, owner_id, plan_id)
        self.db.delete(plan)
        self.db.commit()


class LifePlansQuery:
    def __init__(self, db: Session):
        self.db = db

    def get(self, owner_id: int, plan_id: int) -> LifePlanModel:
        return _get_owned(self.db, owner_id, plan_id)

    def list(self, owner_id: int, start_year: int | None = None, end_year: int | None = None) -> List[LifePlanModel]:
        """Планы по возрастанию target_year (опционально в диапазоне лет, включительно)"""
        query = self.db.query(LifePlanModel).filter(LifePlanModel.owner_id == owner_id)
        if start_year is not None:
            query = query.filter(LifePlanModel.target_year >= start_year)
        if end_year is not None:
            query = query.filter(LifePlanModel.target_year <= end_year)
        return query.order_by(LifePlanModel.target_year.asc(), LifePlanModel.id.asc()).all()
