"""
Challenge service - challenges, their ordered sections and section subjects.
"""
import logging
from typing import Any, Dict, List

from lifeboard.application.documents import DocumentService
from lifeboard.domain.challenge import Challenge, ChallengeSubject, Section
from lifeboard.utils.dates import parse_optional_datetime

logger = logging.getLogger(__name__)


class ChallengeService(DocumentService[Challenge]):
    aggregate_cls = Challenge

    def create(
        self,
        owner_id: int,
        name: str,
        description: str = "",
        status: str = "active",
        start_date=None,
        end_date=None,
        sections: List[Dict[str, Any]] | None = None,
    ) -> Challenge:
        """
        Создать челлендж (опционально сразу с секциями)

        Всё проверяется в памяти до первой записи в БД.
        """
        challenge = Challenge(
            owner_id,
            name=name,
            description=description,
            status=status or "active",
            start_date=parse_optional_datetime(start_date, "start_date"),
            end_date=parse_optional_datetime(end_date, "end_date"),
        )
        for section in sections or []:
            created = challenge.add_section(section.get("name"), section.get("description") or "")
            subjects = section.get("subjects") or []
            if subjects:
                challenge.add_subjects(created.id, subjects)
        self.repo.save(challenge)
        logger.info("Challenge %s created for user %s", challenge.id, owner_id)
        return challenge

    def list(self, owner_id: int) -> List[Challenge]:
        return self.repo.list(owner_id)

    def update(self, owner_id: int, challenge_id: str, changes: Dict[str, Any]) -> Challenge:
        changes = dict(changes)
        if "end_date" in changes:
            changes["end_date"] = parse_optional_datetime(changes["end_date"], "end_date")
        challenge, _ = self.apply(owner_id, challenge_id, lambda c: c.update(**changes))
        return challenge

    def delete(self, owner_id: int, challenge_id: str) -> None:
        """Мягкое удаление"""
        self.apply(owner_id, challenge_id, lambda c: c.soft_delete())
        logger.info("Challenge %s soft-deleted by user %s", challenge_id, owner_id)

    # ── Sections ──

    def add_section(
        self, owner_id: int, challenge_id: str, name: str, description: str = "",
        subjects: List[Dict[str, Any]] | None = None,
    ) -> Section:
        def mutate(challenge: Challenge) -> Section:
            section = challenge.add_section(name, description)
            if subjects:
                challenge.add_subjects(section.id, subjects)
            return section

        _, section = self.apply(owner_id, challenge_id, mutate)
        return section

    def update_section(self, owner_id: int, challenge_id: str, section_id: str, patch: Dict[str, Any]) -> Section:
        _, section = self.apply(owner_id, challenge_id, lambda c: c.update_section(section_id, patch))
        return section

    def remove_section(self, owner_id: int, challenge_id: str, section_id: str) -> Challenge:
        challenge, _ = self.apply(owner_id, challenge_id, lambda c: c.remove_section(section_id))
        return challenge

    # ── Subjects ──

    def add_subject(self, owner_id: int, challenge_id: str, section_id: str, data: Dict[str, Any]) -> ChallengeSubject:
        _, subject = self.apply(owner_id, challenge_id, lambda c: c.add_subject(section_id, data))
        return subject

    def add_subjects(
        self, owner_id: int, challenge_id: str, section_id: str, items: List[Dict[str, Any]]
    ) -> List[ChallengeSubject]:
        _, subjects = self.apply(owner_id, challenge_id, lambda c: c.add_subjects(section_id, items))
        logger.info("Added %s subjects to section %s of challenge %s", len(subjects), section_id, challenge_id)
        return subjects

    def update_subject(
        self, owner_id: int, challenge_id: str, section_id: str, subject_id: str, patch: Dict[str, Any]
    ) -> ChallengeSubject:
        _, subject = self.apply(
            owner_id, challenge_id, lambda c: c.update_subject(section_id, subject_id, patch)
        )
        return subject

    def remove_subject(self, owner_id: int, challenge_id: str, section_id: str, subject_id: str) -> Section:
        challenge, _ = self.apply(owner_id, challenge_id, lambda c: c.remove_subject(section_id, subject_id))
        return challenge.sections.find_by_id(section_id)
