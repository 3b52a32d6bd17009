"""Tests for ChallengeService: челленджи, секции и темы через репозиторий."""
import pytest

from lifeboard.application.challenges import ChallengeService
from lifeboard.domain.errors import ValidationError, NotFoundError

ACCOUNT = 1
OTHER = 2


class TestCreateChallenge:
    def test_create_with_sections(self, db_session):
        challenge = ChallengeService(db_session).create(
            ACCOUNT,
            name="Python",
            sections=[
                {"name": "Week 1", "subjects": [{"name": "Variables"}, {"name": "Loops"}]},
                {"name": "Week 2"},
            ],
        )

        loaded = ChallengeService(db_session).get(ACCOUNT, challenge.id)
        assert [s.order for s in loaded.sections] == [1, 2]
        assert [s.name for s in loaded.sections[0].subjects] == ["Variables", "Loops"]
        assert loaded.version == 1

    def test_invalid_section_writes_nothing(self, db_session):
        service = ChallengeService(db_session)
        with pytest.raises(ValidationError):
            service.create(ACCOUNT, name="Python", sections=[{"name": "Week 1", "subjects": [{"name": ""}]}])
        assert service.list(ACCOUNT) == []

    def test_end_date_before_start(self, db_session):
        with pytest.raises(ValidationError, match="End date cannot be before start date"):
            ChallengeService(db_session).create(
                ACCOUNT, name="Python", start_date="2025-02-01", end_date="2025-01-01",
            )

    def test_list_excludes_soft_deleted(self, db_session):
        service = ChallengeService(db_session)
        gone = service.create(ACCOUNT, name="Gone")
        kept = service.create(ACCOUNT, name="Kept")

        service.delete(ACCOUNT, gone.id)

        assert [c.id for c in service.list(ACCOUNT)] == [kept.id]
        with pytest.raises(NotFoundError):
            service.get(ACCOUNT, gone.id)


class TestChallengeUpdates:
    def test_update_root_fields(self, db_session):
        service = ChallengeService(db_session)
        challenge = service.create(ACCOUNT, name="Python", start_date="2025-01-01")

        updated = service.update(ACCOUNT, challenge.id, {"status": "completed", "end_date": "2025-03-01"})

        assert updated.status == "completed"
        assert updated.end_date.isoformat() == "2025-03-01T00:00:00+00:00"
        assert updated.version == 2

    def test_failed_update_keeps_stored_document(self, db_session):
        service = ChallengeService(db_session)
        challenge = service.create(ACCOUNT, name="Python")

        with pytest.raises(ValidationError):
            service.update(ACCOUNT, challenge.id, {"status": "archived"})

        stored = service.get(ACCOUNT, challenge.id)
        assert stored.status == "active"
        assert stored.version == 1

    def test_other_owner_cannot_update(self, db_session):
        service = ChallengeService(db_session)
        challenge = service.create(ACCOUNT, name="Python")
        with pytest.raises(NotFoundError):
            service.update(OTHER, challenge.id, {"name": "Mine now"})


class TestSectionsAndSubjects:
    def test_section_lifecycle(self, db_session):
        service = ChallengeService(db_session)
        challenge = service.create(ACCOUNT, name="Python")

        first = service.add_section(ACCOUNT, challenge.id, "Week 1", subjects=[{"name": "Loops"}])
        second = service.add_section(ACCOUNT, challenge.id, "Week 2")
        service.update_section(ACCOUNT, challenge.id, second.id, {"description": "functions"})
        result = service.remove_section(ACCOUNT, challenge.id, first.id)

        assert [(s.name, s.order) for s in result.sections] == [("Week 2", 1)]
        assert result.sections[0].description == "functions"

    def test_subject_lifecycle(self, db_session):
        service = ChallengeService(db_session)
        challenge = service.create(ACCOUNT, name="Python")
        section = service.add_section(ACCOUNT, challenge.id, "Week 1")

        batch = service.add_subjects(ACCOUNT, challenge.id, section.id, [{"name": "a"}, {"name": "b"}])
        single = service.add_subject(ACCOUNT, challenge.id, section.id, {"name": "c"})
        service.update_subject(ACCOUNT, challenge.id, section.id, single.id, {"status": "completed"})
        remaining = service.remove_subject(ACCOUNT, challenge.id, section.id, batch[0].id)

        assert [s.name for s in remaining.subjects] == ["b", "c"]
        stored = service.get(ACCOUNT, challenge.id)
        assert stored.get_subject(section.id, single.id).status == "completed"

    def test_subject_in_unknown_section(self, db_session):
        service = ChallengeService(db_session)
        challenge = service.create(ACCOUNT, name="Python")
        with pytest.raises(NotFoundError, match="Section not found"):
            service.add_subject(ACCOUNT, challenge.id, "f" * 32, {"name": "x"})
