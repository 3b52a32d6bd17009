"""
Profile - account data plus a few progress counters and achievements.

Read-only; editing the account goes through auth (change password).
"""
from decimal import Decimal

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from lifeboard.domain.challenge import Challenge
from lifeboard.infrastructure.db.models import User, TransactionModel, LifePlanModel
from lifeboard.infrastructure.repository import AggregateRepository

POINTS_PER_CHALLENGE = 100
POINTS_PER_LIFE_PLAN = 50
SAVINGS_PER_POINT = Decimal("10")
SAVER_THRESHOLD = Decimal("1000")


class GetProfileQuery:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, user: User) -> dict:
        challenges_completed = sum(
            1 for c in AggregateRepository(self.db, Challenge).list(user.id) if c.status == "completed"
        )
        life_plans = self.db.query(func.count(LifePlanModel.id)).filter(
            LifePlanModel.owner_id == user.id
        ).scalar() or 0
        savings = self._savings(user.id)

        points = challenges_completed * POINTS_PER_CHALLENGE + life_plans * POINTS_PER_LIFE_PLAN
        if savings > 0:
            points += int(savings // SAVINGS_PER_POINT)

        return {
            "id": user.id,
            "username": user.username,
            "email": user.email,
            "join_date": user.created_at.strftime("%B %Y") if user.created_at else None,
            "stats": {
                "challenges_completed": challenges_completed,
                "life_plans": life_plans,
                "total_savings": str(savings.quantize(Decimal("0.01"))),
                "total_points": points,
            },
            "achievements": [
                {"key": "first_challenge", "name": "First Challenge Completed", "unlocked": challenges_completed > 0},
                {"key": "saver_pro", "name": "Saver Pro", "unlocked": savings > SAVER_THRESHOLD},
                {"key": "goal_getter", "name": "Goal Getter", "unlocked": life_plans > 0},
            ],
        }

    def _savings(self, owner_id: int) -> Decimal:
        """Доходы минус расходы за всё время"""
        signed = case((TransactionModel.type == "earning", TransactionModel.amount), else_=-TransactionModel.amount)
        total = self.db.query(func.sum(signed)).filter(TransactionModel.owner_id == owner_id).scalar()
        return Decimal(str(total or 0))
