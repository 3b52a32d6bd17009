"""Tests for DashboardService: сводка по всем модулям."""
from datetime import datetime, timezone

from lifeboard.application.challenges import ChallengeService
from lifeboard.application.dashboard import DashboardService
from lifeboard.application.life_plans import CreateLifePlanUseCase
from lifeboard.application.study import StudyStructureService
from lifeboard.application.timetable import TimetableService
from lifeboard.application.transactions import CreateTransactionUseCase

ACCOUNT = 1
OTHER = 2


def test_empty_dashboard(db_session):
    stats = DashboardService(db_session).get_stats(ACCOUNT)

    assert stats["quick_stats"] == {"monthly_progress": 0, "completed_tasks": 0, "active_goals": 0}
    assert stats["module_stats"]["earnings"] == {"total_balance": "0.00", "transaction_count": 0}
    assert stats["module_stats"]["study"] == {"resources": 0, "categories": 0, "branches": 0}
    assert stats["recent_activity"] == {"challenges": [], "transactions": []}


def test_dashboard_aggregates_modules(db_session):
    challenges = ChallengeService(db_session)
    done = challenges.create(ACCOUNT, name="Done")
    challenges.update(ACCOUNT, done.id, {"status": "completed"})
    challenges.create(ACCOUNT, name="Running")
    challenges.create(OTHER, name="Not mine")

    create_tx = CreateTransactionUseCase(db_session)
    create_tx.execute(ACCOUNT, type="earning", amount="500", description="Salary", date="2025-01-10")
    create_tx.execute(ACCOUNT, type="expense", amount="120.25", description="Food", date="2025-01-12")

    CreateLifePlanUseCase(db_session).execute(
        ACCOUNT, start_age=25, end_age=30, target_year=2030, description="House",
    )

    study = StudyStructureService(db_session)
    math = study.add_branch(ACCOUNT, "Math")
    algebra = study.add_subject(ACCOUNT, math.id, "Algebra")
    study.add_material(ACCOUNT, math.id, algebra.id, {"title": "Book", "link": "https://a", "type": "pdf"})
    study.add_material(ACCOUNT, math.id, algebra.id, {"title": "Talk", "link": "https://b", "type": "video"})

    TimetableService(db_session).replace_day(ACCOUNT, "2025-01-10", [])

    stats = DashboardService(db_session).get_stats(ACCOUNT)

    assert stats["quick_stats"]["completed_tasks"] == 1
    assert stats["quick_stats"]["active_goals"] == 2
    assert stats["quick_stats"]["monthly_progress"] == 50
    assert stats["module_stats"]["challenges"] == {"active": 1, "completed": 1, "total": 2}
    assert stats["module_stats"]["earnings"] == {"total_balance": "379.75", "transaction_count": 2}
    assert stats["module_stats"]["life_plan"] == {"goals_set": 1}
    assert stats["module_stats"]["study"] == {"resources": 2, "categories": 2, "branches": 1}
    assert stats["module_stats"]["timetable"] == {"scheduled_days": 1}
    assert [t["description"] for t in stats["recent_activity"]["transactions"]] == ["Food", "Salary"]
    assert len(stats["recent_activity"]["challenges"]) == 2


def test_monthly_progress_uses_given_month(db_session):
    ChallengeService(db_session).create(ACCOUNT, name="Old")

    stats = DashboardService(db_session).get_stats(
        ACCOUNT, now=datetime(2100, 1, 15, tzinfo=timezone.utc),
    )

    assert stats["quick_stats"]["monthly_progress"] == 0
    assert stats["module_stats"]["challenges"]["total"] == 1
