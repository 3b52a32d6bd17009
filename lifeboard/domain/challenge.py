"""
Challenge aggregate: challenge → sections (ordered) → subjects → resources.

Section progress is stored as its own field and is not derived from the
subjects. Status values may move freely between any members of their enum.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.domain.collection import Entry, OwnedCollection
from lifeboard.domain.errors import ValidationError
from lifeboard.utils.dates import from_iso, parse_optional_datetime, utcnow
from lifeboard.utils.validation import require_text, optional_text, require_choice, require_percent

CHALLENGE_STATUSES = ("active", "completed", "paused")
SUBJECT_STATUSES = ("not_started", "in_progress", "completed")
RESOURCE_TYPES = ("video", "article", "document", "other")


@dataclass(kw_only=True)
class Resource:
    title: str = ""
    url: str = ""
    type: str = "other"

    def validate(self) -> None:
        require_choice(self.type, RESOURCE_TYPES, "resource type")

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "url": self.url, "type": self.type}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Resource":
        return cls(title=data.get("title") or "", url=data.get("url") or "", type=data.get("type") or "other")


@dataclass(kw_only=True)
class ChallengeSubject(Entry):
    name: str
    description: str = ""
    status: str = "not_started"
    progress: int = 0
    start_date: datetime | None = None
    end_date: datetime | None = None
    resources: List[Resource] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    MUTABLE_FIELDS = frozenset({"name", "description", "status", "progress", "start_date", "end_date", "resources"})
    LABEL = "Subject"

    def validate(self) -> None:
        self.name = require_text(self.name, "Subject name is required")
        self.description = optional_text(self.description, label="Description")
        require_choice(self.status, SUBJECT_STATUSES, "status")
        require_percent(self.progress)
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError("End date cannot be before start date")
        for resource in self.resources:
            resource.validate()

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["resources"] = [r.to_dict() for r in self.resources]
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ChallengeSubject":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            status=data.get("status", "not_started"),
            progress=data.get("progress", 0),
            start_date=from_iso(data.get("start_date")),
            end_date=from_iso(data.get("end_date")),
            resources=[Resource.from_dict(r) for r in data.get("resources") or []],
            created_at=from_iso(data.get("created_at")),
            updated_at=from_iso(data.get("updated_at")),
        )


@dataclass(kw_only=True)
class Section(Entry):
    name: str
    description: str = ""
    order: int = 0
    progress: int = 0
    subjects: OwnedCollection = field(default_factory=lambda: OwnedCollection(ChallengeSubject))

    MUTABLE_FIELDS = frozenset({"name", "description", "progress"})
    LABEL = "Section"

    def validate(self) -> None:
        self.name = require_text(self.name, "Section name is required")
        self.description = optional_text(self.description, label="Description")
        require_percent(self.progress)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Section":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            order=data.get("order", 0),
            progress=data.get("progress", 0),
            subjects=OwnedCollection.from_list(ChallengeSubject, data.get("subjects")),
        )


def build_subject(data: Dict[str, Any]) -> ChallengeSubject:
    """Новая тема из входных данных (статус и прогресс всегда начальные)"""
    if not isinstance(data, dict):
        raise ValidationError("Each subject must be an object")
    now = utcnow()
    return ChallengeSubject(
        name=data.get("name"),
        description=data.get("description") or "",
        start_date=parse_optional_datetime(data.get("start_date"), "start_date"),
        end_date=parse_optional_datetime(data.get("end_date"), "end_date"),
        created_at=now,
        updated_at=now,
    )


class Challenge(AggregateRoot):
    """
    Челлендж пользователя

    Удаление мягкое (is_deleted): документ остаётся в хранилище,
    но исключается из обычных выборок.
    """
    KIND = "challenge"
    LABEL = "Challenge"

    MUTABLE_FIELDS = frozenset({"name", "description", "status", "end_date"})

    def __init__(
        self,
        owner_id: int,
        name: str,
        description: str = "",
        status: str = "active",
        start_date: datetime | None = None,
        end_date: datetime | None = None,
        **kwargs,
    ):
        super().__init__(owner_id, **kwargs)
        self.name = require_text(name, "Please provide a name for the challenge")
        self.description = optional_text(description, label="Description")
        self.status = require_choice(status, CHALLENGE_STATUSES, "status")
        self.start_date = start_date or self.created_at
        if end_date is not None and end_date < self.start_date:
            raise ValidationError("End date cannot be before start date")
        self.end_date = end_date
        self.sections: OwnedCollection[Section] = OwnedCollection(Section, ordered=True)

    # ── Root fields ──

    def update(self, **changes) -> None:
        unknown = sorted(set(changes) - self.MUTABLE_FIELDS)
        if unknown:
            raise ValidationError(f"Unknown or read-only challenge fields: {', '.join(unknown)}")

        if "name" in changes:
            changes["name"] = require_text(changes["name"], "Please provide a name for the challenge")
        if "description" in changes:
            changes["description"] = optional_text(changes["description"], label="Description")
        if "status" in changes:
            require_choice(changes["status"], CHALLENGE_STATUSES, "status")
        if changes.get("end_date") is not None and changes["end_date"] < self.start_date:
            raise ValidationError("End date cannot be before start date")

        for key, value in changes.items():
            setattr(self, key, value)
        self.touch()

    def soft_delete(self) -> None:
        self.is_deleted = True
        self.touch()

    # ── Sections ──

    def add_section(self, name: str, description: str = "") -> Section:
        section = self.sections.insert(Section(name=name, description=description or ""))
        self.touch()
        return section

    def update_section(self, section_id: str, patch: Dict[str, Any]) -> Section:
        section = self.sections.update(section_id, patch)
        self.touch(section)
        return section

    def remove_section(self, section_id: str) -> None:
        self.sections.remove(section_id)
        self.touch()

    # ── Subjects ──

    def add_subject(self, section_id: str, data: Dict[str, Any]) -> ChallengeSubject:
        section = self.sections.find_by_id(section_id)
        subject = section.subjects.insert(build_subject(data))
        self.touch(subject)
        return subject

    def add_subjects(self, section_id: str, items: List[Dict[str, Any]]) -> List[ChallengeSubject]:
        """Пакетное добавление: либо все темы, либо ни одной"""
        if not isinstance(items, list) or not items:
            raise ValidationError("Subjects array is required and must not be empty")
        section = self.sections.find_by_id(section_id)

        subjects = [build_subject(item) for item in items]
        for subject in subjects:
            subject.validate()

        added = [section.subjects.insert(subject) for subject in subjects]
        self.touch(*added)
        return added

    def get_subject(self, section_id: str, subject_id: str) -> ChallengeSubject:
        return self.sections.find_by_id(section_id).subjects.find_by_id(subject_id)

    def update_subject(self, section_id: str, subject_id: str, patch: Dict[str, Any]) -> ChallengeSubject:
        section = self.sections.find_by_id(section_id)
        patch = dict(patch)
        for key in ("start_date", "end_date"):
            if key in patch:
                patch[key] = parse_optional_datetime(patch[key], key)
        if "resources" in patch:
            patch["resources"] = [
                r if isinstance(r, Resource) else Resource.from_dict(r) for r in patch["resources"] or []
            ]
        subject = section.subjects.update(subject_id, patch)
        self.touch(subject, section)
        return subject

    def remove_subject(self, section_id: str, subject_id: str) -> None:
        section = self.sections.find_by_id(section_id)
        section.subjects.remove(subject_id)
        self.touch(section)

    # ── Serialization ──

    def body_to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "status": self.status,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_deleted": self.is_deleted,
            "sections": self.sections.to_list(),
        }

    def load_body(self, body: Dict[str, Any]) -> None:
        self.name = body["name"]
        self.description = body.get("description") or ""
        self.status = body.get("status", "active")
        self.start_date = from_iso(body.get("start_date"))
        self.end_date = from_iso(body.get("end_date"))
        self.is_deleted = body.get("is_deleted", self.is_deleted)
        self.sections = OwnedCollection.from_list(Section, body.get("sections"), ordered=True)
