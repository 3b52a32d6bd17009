"""
Dashboard - aggregated overview across all features.

Pure read-layer: no mutations. Blocks:
  1. Quick stats (monthly challenge progress, completed challenges, active goals)
  2. Module stats (earnings, challenges, life plan, study, timetable)
  3. Recent activity (latest challenges and transactions)
"""
from datetime import datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session

from lifeboard.domain.challenge import Challenge
from lifeboard.domain.daily_schedule import DailySchedule
from lifeboard.domain.study_structure import StudyStructure, STUDY_STRUCTURE_KEY
from lifeboard.infrastructure.db.models import TransactionModel, LifePlanModel
from lifeboard.infrastructure.repository import AggregateRepository
from lifeboard.utils.dates import utcnow

RECENT_LIMIT = 5


class DashboardService:
    def __init__(self, db: Session):
        self.db = db

    def get_stats(self, owner_id: int, now: datetime | None = None) -> dict:
        now = now or utcnow()
        month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)

        challenges = AggregateRepository(self.db, Challenge).list(owner_id)
        life_plans = self.db.query(func.count(LifePlanModel.id)).filter(
            LifePlanModel.owner_id == owner_id
        ).scalar() or 0

        # ── Quick stats ──
        created_this_month = [c for c in challenges if c.created_at >= month_start]
        completed_this_month = [
            c for c in challenges if c.status == "completed" and c.updated_at >= month_start
        ]
        monthly_progress = (
            round(len(completed_this_month) / len(created_this_month) * 100)
            if created_this_month else 0
        )
        completed = sum(1 for c in challenges if c.status == "completed")
        active = sum(1 for c in challenges if c.status == "active")

        return {
            "quick_stats": {
                "monthly_progress": min(monthly_progress, 100),
                "completed_tasks": completed,
                "active_goals": active + life_plans,
            },
            "module_stats": {
                "earnings": self._earnings(owner_id),
                "challenges": {"active": active, "completed": completed, "total": len(challenges)},
                "life_plan": {"goals_set": life_plans},
                "study": self._study(owner_id),
                "timetable": {
                    "scheduled_days": len(AggregateRepository(self.db, DailySchedule).list(owner_id)),
                },
            },
            "recent_activity": {
                "challenges": [
                    {
                        "id": c.id,
                        "name": c.name,
                        "status": c.status,
                        "created_at": c.created_at.isoformat(),
                        "updated_at": c.updated_at.isoformat(),
                    }
                    for c in challenges[:RECENT_LIMIT]
                ],
                "transactions": self._recent_transactions(owner_id),
            },
        }

    # ------------------------------------------------------------------

    def _earnings(self, owner_id: int) -> dict[str, Any]:
        rows = self.db.query(
            TransactionModel.type,
            func.sum(TransactionModel.amount),
            func.count(TransactionModel.id),
        ).filter(TransactionModel.owner_id == owner_id).group_by(TransactionModel.type).all()

        balance = Decimal("0")
        count = 0
        for tx_type, total, n in rows:
            amount = Decimal(str(total or 0))
            balance += amount if tx_type == "earning" else -amount
            count += n
        return {
            "total_balance": str(balance.quantize(Decimal("0.01"))),
            "transaction_count": count,
        }

    def _study(self, owner_id: int) -> dict[str, Any]:
        structure = AggregateRepository(self.db, StudyStructure).find_by_natural_key(owner_id, STUDY_STRUCTURE_KEY)
        if structure is None:
            return {"resources": 0, "categories": 0, "branches": 0}
        stats = structure.statistics()
        return {
            "resources": stats["total_materials"],
            "categories": len(stats["materials_by_type"]),
            "branches": stats["total_branches"],
        }

    def _recent_transactions(self, owner_id: int) -> list[dict]:
        rows = self.db.query(TransactionModel).filter(
            TransactionModel.owner_id == owner_id
        ).order_by(TransactionModel.date.desc(), TransactionModel.id.desc()).limit(RECENT_LIMIT).all()
        return [
            {
                "id": tx.id,
                "description": tx.description,
                "amount": str(tx.amount),
                "type": tx.type,
                "date": tx.date.isoformat() if tx.date else None,
            }
            for tx in rows
        ]
