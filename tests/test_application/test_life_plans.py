"""Tests for life plan use cases."""
import pytest

from lifeboard.application.life_plans import (
    CreateLifePlanUseCase, UpdateLifePlanUseCase, DeleteLifePlanUseCase, LifePlansQuery,
)
from lifeboard.domain.errors import ValidationError, NotFoundError

ACCOUNT = 1
OTHER = 2


def _plan(db_session, start_age=25, end_age=30, target_year=2030, description="Buy a house"):
    return CreateLifePlanUseCase(db_session).execute(
        ACCOUNT, start_age=start_age, end_age=end_age, target_year=target_year, description=description,
    )


class TestCreateLifePlan:
    def test_create(self, db_session):
        plan = _plan(db_session, start_age="25")
        assert plan.start_age == 25
        assert plan.target_year == 2030

    @pytest.mark.parametrize("kwargs,message", [
        ({"start_age": 17}, "Start age must be at least 18"),
        ({"end_age": 18}, "End age must be at least 1 year after start age"),
        ({"start_age": 40, "end_age": 30}, "End age must be greater than start age"),
        ({"target_year": 2000}, "Target year must be in the future"),
        ({"start_age": None}, "Please add a start age"),
        ({"description": ""}, "Please add a description"),
    ])
    def test_validation(self, db_session, kwargs, message):
        with pytest.raises(ValidationError, match=message):
            _plan(db_session, **kwargs)


class TestUpdateLifePlan:
    def test_partial_update_validates_combination(self, db_session):
        plan = _plan(db_session)

        with pytest.raises(ValidationError, match="greater than start age"):
            UpdateLifePlanUseCase(db_session).execute(ACCOUNT, plan.id, start_age=35)

        UpdateLifePlanUseCase(db_session).execute(ACCOUNT, plan.id, start_age=28, description="Buy a flat")
        stored = LifePlansQuery(db_session).get(ACCOUNT, plan.id)
        assert stored.start_age == 28
        assert stored.end_age == 30
        assert stored.description == "Buy a flat"

    def test_other_owner(self, db_session):
        plan = _plan(db_session)
        with pytest.raises(NotFoundError, match="Plan not found"):
            UpdateLifePlanUseCase(db_session).execute(OTHER, plan.id, end_age=40)
        with pytest.raises(NotFoundError):
            DeleteLifePlanUseCase(db_session).execute(OTHER, plan.id)


class TestLifePlansQuery:
    def test_list_by_target_year(self, db_session):
        late = _plan(db_session, target_year=2040)
        early = _plan(db_session, target_year=2028)
        middle = _plan(db_session, target_year=2032)

        query = LifePlansQuery(db_session)
        assert [p.id for p in query.list(ACCOUNT)] == [early.id, middle.id, late.id]
        assert [p.id for p in query.list(ACCOUNT, 2030, 2040)] == [middle.id, late.id]

    def test_delete(self, db_session):
        plan = _plan(db_session)
        DeleteLifePlanUseCase(db_session).execute(ACCOUNT, plan.id)
        assert LifePlansQuery(db_session).list(ACCOUNT) == []
