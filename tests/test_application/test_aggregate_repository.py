"""Tests for AggregateRepository: документ целиком, версии, изоляция владельцев."""
from datetime import date

import pytest
from sqlalchemy.exc import OperationalError

from lifeboard.domain.challenge import Challenge
from lifeboard.domain.daily_schedule import DailySchedule
from lifeboard.domain.errors import ConflictError, NotFoundError, StorageError, UnauthorizedError
from lifeboard.domain.identity import new_id
from lifeboard.domain.study_structure import StudyStructure, STUDY_STRUCTURE_KEY
from lifeboard.infrastructure.db.models import AggregateDocument
from lifeboard.infrastructure.repository import AggregateRepository

ACCOUNT = 1
OTHER = 2


def _saved_challenge(db_session, name="Python"):
    repo = AggregateRepository(db_session, Challenge)
    return repo, repo.save(Challenge(ACCOUNT, name=name))


class TestSaveAndLoad:
    def test_insert_sets_version_one(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        assert challenge.version == 1

        row = db_session.get(AggregateDocument, challenge.id)
        assert row.kind == "challenge"
        assert row.owner_id == ACCOUNT
        assert row.body["name"] == "Python"

    def test_nested_mutation_written_with_document(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        section = challenge.add_section("Week 1")
        challenge.add_subject(section.id, {"name": "Loops"})
        repo.save(challenge)

        loaded = repo.load(ACCOUNT, challenge.id)
        assert loaded.version == 2
        assert loaded.sections[0].subjects[0].name == "Loops"

    def test_unmodified_save_keeps_version(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        loaded = repo.load(ACCOUNT, challenge.id)

        repo.save(loaded)

        assert repo.load(ACCOUNT, challenge.id).version == 1

    def test_other_owner_gets_not_found(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        with pytest.raises(NotFoundError, match="Challenge not found"):
            repo.load(OTHER, challenge.id)

    @pytest.mark.parametrize("bad_id", ["", "123", "z" * 32])
    def test_malformed_id_is_not_found(self, db_session, bad_id):
        repo = AggregateRepository(db_session, Challenge)
        with pytest.raises(NotFoundError):
            repo.load(ACCOUNT, bad_id)

    def test_missing_id_is_not_found(self, db_session):
        repo = AggregateRepository(db_session, Challenge)
        with pytest.raises(NotFoundError):
            repo.load(ACCOUNT, new_id())

    def test_owner_required(self, db_session):
        repo = AggregateRepository(db_session, Challenge)
        with pytest.raises(UnauthorizedError):
            repo.list(None)

    def test_kind_is_part_of_lookup(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        with pytest.raises(NotFoundError):
            AggregateRepository(db_session, StudyStructure).load(ACCOUNT, challenge.id)


class TestConcurrency:
    def test_stale_save_is_rejected(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        first = repo.load(ACCOUNT, challenge.id)
        second = repo.load(ACCOUNT, challenge.id)

        first.add_section("A")
        repo.save(first)
        second.add_section("B")

        with pytest.raises(ConflictError):
            repo.save(second)

        stored = repo.load(ACCOUNT, challenge.id)
        assert [s.name for s in stored.sections] == ["A"]
        assert stored.version == 2

    def test_concurrent_subject_adds_lose_nothing_silently(self, db_session):
        """Два добавления в одну секцию: второе отклоняется, а не затирает первое"""
        repo, challenge = _saved_challenge(db_session)
        section = challenge.add_section("Week 1")
        repo.save(challenge)

        a = repo.load(ACCOUNT, challenge.id)
        b = repo.load(ACCOUNT, challenge.id)
        a.add_subject(section.id, {"name": "from A"})
        b.add_subject(section.id, {"name": "from B"})
        repo.save(a)
        with pytest.raises(ConflictError):
            repo.save(b)

        reloaded = repo.load(ACCOUNT, challenge.id)
        reloaded.add_subject(section.id, {"name": "from B"})
        repo.save(reloaded)

        names = [s.name for s in repo.load(ACCOUNT, challenge.id).sections[0].subjects]
        assert names == ["from A", "from B"]


class TestListAndDelete:
    def test_soft_deleted_hidden(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        _, kept = _saved_challenge(db_session, "Kept")
        challenge.soft_delete()
        repo.save(challenge)

        assert [c.id for c in repo.list(ACCOUNT)] == [kept.id]
        with pytest.raises(NotFoundError):
            repo.load(ACCOUNT, challenge.id)
        assert repo.load(ACCOUNT, challenge.id, include_deleted=True).is_deleted is True

    def test_list_scoped_to_owner(self, db_session):
        repo, _ = _saved_challenge(db_session)
        repo.save(Challenge(OTHER, name="Not mine"))

        assert [c.name for c in repo.list(ACCOUNT)] == ["Python"]

    def test_hard_delete(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        repo.delete(ACCOUNT, challenge.id)

        assert db_session.query(AggregateDocument).filter(AggregateDocument.id == challenge.id).count() == 0
        with pytest.raises(NotFoundError):
            repo.delete(ACCOUNT, challenge.id)

    def test_delete_other_owner_not_found(self, db_session):
        repo, challenge = _saved_challenge(db_session)
        with pytest.raises(NotFoundError):
            repo.delete(OTHER, challenge.id)
        assert repo.load(ACCOUNT, challenge.id).id == challenge.id

    def test_key_range(self, db_session):
        repo = AggregateRepository(db_session, DailySchedule)
        for day in (date(2025, 3, 3), date(2025, 3, 1), date(2025, 3, 9)):
            repo.save(DailySchedule(ACCOUNT, day))

        found = repo.list(ACCOUNT, key_from="2025-03-01", key_to="2025-03-05")
        assert [s.natural_key for s in found] == ["2025-03-01", "2025-03-03"]


class TestNaturalKey:
    def test_load_or_create_returns_same_document(self, db_session):
        repo = AggregateRepository(db_session, StudyStructure)

        first = repo.load_or_create(ACCOUNT, STUDY_STRUCTURE_KEY, lambda: StudyStructure(ACCOUNT))
        second = repo.load_or_create(ACCOUNT, STUDY_STRUCTURE_KEY, lambda: StudyStructure(ACCOUNT))

        assert first.id == second.id
        assert db_session.query(AggregateDocument).filter(AggregateDocument.kind == "study_structure").count() == 1

    def test_natural_key_unique_per_owner(self, db_session):
        repo = AggregateRepository(db_session, StudyStructure)
        mine = repo.load_or_create(ACCOUNT, STUDY_STRUCTURE_KEY, lambda: StudyStructure(ACCOUNT))
        theirs = repo.load_or_create(OTHER, STUDY_STRUCTURE_KEY, lambda: StudyStructure(OTHER))
        assert mine.id != theirs.id

    def test_duplicate_insert_returns_winner(self, db_session):
        repo = AggregateRepository(db_session, StudyStructure)
        winner = StudyStructure(ACCOUNT)
        repo.save(winner)

        calls = []

        def factory():
            calls.append(1)
            return StudyStructure(ACCOUNT)

        # simulate a race: the first lookup misses, the insert then hits the unique key
        original = repo.find_by_natural_key
        lookups = []

        def racing_lookup(owner, key):
            lookups.append(key)
            if len(lookups) == 1:
                return None
            return original(owner, key)

        repo.find_by_natural_key = racing_lookup

        result = repo.load_or_create(ACCOUNT, STUDY_STRUCTURE_KEY, factory)

        assert calls == [1]
        assert result.id == winner.id

    def test_upsert_keeps_id_and_bumps_version(self, db_session):
        repo = AggregateRepository(db_session, DailySchedule)
        day = date(2025, 3, 14)
        original = DailySchedule(ACCOUNT, day)
        original.replace_slots([{"start_time": "09:00", "end_time": "10:00"}])
        repo.upsert_by_natural_key(ACCOUNT, "2025-03-14", original)

        replacement = DailySchedule(ACCOUNT, day)
        replacement.replace_slots([{"start_time": "12:00", "end_time": "13:00"}])
        saved = repo.upsert_by_natural_key(ACCOUNT, "2025-03-14", replacement)

        assert saved.id == original.id
        assert saved.version == 2
        stored = repo.find_by_natural_key(ACCOUNT, "2025-03-14")
        assert [s.start_time for s in stored.time_slots] == ["12:00"]


class TestStorageErrors:
    def test_store_failure_surfaces_as_storage_error(self, db_session, monkeypatch):
        repo, challenge = _saved_challenge(db_session)

        def broken(*args, **kwargs):
            raise OperationalError("SELECT", {}, Exception("connection lost"))

        monkeypatch.setattr(db_session, "execute", broken)

        with pytest.raises(StorageError):
            repo.load(ACCOUNT, challenge.id)
