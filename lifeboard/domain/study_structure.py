"""
Study structure aggregate: one document per owner.

    StudyStructure → branches → subjects → materials

Branch names are unique per owner and subject names unique per branch
(case-insensitive). Deleting a branch drops its subjects and their materials
together with it: they have no existence outside the document.
"""
from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List

from lifeboard.domain.aggregate import AggregateRoot
from lifeboard.domain.collection import Entry, OwnedCollection
from lifeboard.domain.errors import ValidationError
from lifeboard.utils.dates import from_iso, utcnow
from lifeboard.utils.validation import require_text, optional_text, require_choice

STUDY_STRUCTURE_KEY = "default"
MATERIAL_TYPES = ("pdf", "video", "website", "document", "other")

BRANCH_NAME_MAX = 100
SUBJECT_NAME_MAX = 100
MATERIAL_TITLE_MAX = 200


@dataclass(kw_only=True)
class Material(Entry):
    title: str
    link: str
    description: str = ""
    type: str = "other"
    created_at: datetime | None = None

    MUTABLE_FIELDS = frozenset({"title", "link", "description", "type"})
    NAME_FIELD = "title"
    LABEL = "Study material"

    def validate(self) -> None:
        self.title = require_text(
            self.title, "Please add a title for the material", MATERIAL_TITLE_MAX, "Title"
        )
        self.link = require_text(self.link, "Please provide a link to the material")
        self.description = optional_text(self.description, label="Description")
        require_choice(self.type, MATERIAL_TYPES, "material type")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Material":
        return cls(
            id=data["id"],
            title=data["title"],
            link=data["link"],
            description=data.get("description") or "",
            type=data.get("type", "other"),
            created_at=from_iso(data.get("created_at")),
        )


@dataclass(kw_only=True)
class StudySubject(Entry):
    name: str
    description: str = ""
    is_active: bool = True
    materials: OwnedCollection = field(default_factory=lambda: OwnedCollection(Material))
    created_at: datetime | None = None
    updated_at: datetime | None = None

    MUTABLE_FIELDS = frozenset({"name", "description", "is_active"})
    LABEL = "Subject"

    def validate(self) -> None:
        self.name = require_text(self.name, "Please add a subject name", SUBJECT_NAME_MAX, "Subject name")
        self.description = optional_text(self.description, label="Description")
        if not isinstance(self.is_active, bool):
            raise ValidationError("is_active must be a boolean")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StudySubject":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            is_active=data.get("is_active", True),
            materials=OwnedCollection.from_list(Material, data.get("materials")),
            created_at=from_iso(data.get("created_at")),
            updated_at=from_iso(data.get("updated_at")),
        )


@dataclass(kw_only=True)
class Branch(Entry):
    name: str
    description: str = ""
    is_active: bool = True
    subjects: OwnedCollection = field(default_factory=lambda: OwnedCollection(StudySubject))
    created_at: datetime | None = None
    updated_at: datetime | None = None

    MUTABLE_FIELDS = frozenset({"name", "description", "is_active"})
    LABEL = "Branch"

    def validate(self) -> None:
        self.name = require_text(self.name, "Please add a branch name", BRANCH_NAME_MAX, "Branch name")
        self.description = optional_text(self.description, label="Description")
        if not isinstance(self.is_active, bool):
            raise ValidationError("is_active must be a boolean")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Branch":
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description") or "",
            is_active=data.get("is_active", True),
            subjects=OwnedCollection.from_list(StudySubject, data.get("subjects")),
            created_at=from_iso(data.get("created_at")),
            updated_at=from_iso(data.get("updated_at")),
        )


class StudyStructure(AggregateRoot):
    """Учебная структура пользователя (одна на владельца)"""
    KIND = "study_structure"
    LABEL = "Study structure"

    def __init__(self, owner_id: int, **kwargs):
        kwargs.setdefault("natural_key", STUDY_STRUCTURE_KEY)
        super().__init__(owner_id, **kwargs)
        self.branches: OwnedCollection[Branch] = OwnedCollection(Branch)

    # ── Branches ──

    def add_branch(self, name: str, description: str = "") -> Branch:
        now = utcnow()
        branch = self.branches.insert(
            Branch(name=name, description=description or "", created_at=now, updated_at=now),
            unique_name=True,
        )
        self.touch()
        return branch

    def update_branch(self, branch_id: str, patch: Dict[str, Any]) -> Branch:
        branch = self.branches.update(branch_id, patch, unique_name=True)
        self.touch(branch)
        return branch

    def remove_branch(self, branch_id: str) -> None:
        self.branches.remove(branch_id)
        self.touch()

    # ── Subjects ──

    def add_subject(self, branch_id: str, name: str, description: str = "") -> StudySubject:
        branch = self.branches.find_by_id(branch_id)
        now = utcnow()
        subject = branch.subjects.insert(
            StudySubject(name=name, description=description or "", created_at=now, updated_at=now),
            unique_name=True,
        )
        self.touch(branch)
        return subject

    def get_subject(self, branch_id: str, subject_id: str) -> StudySubject:
        return self.branches.find_by_id(branch_id).subjects.find_by_id(subject_id)

    def update_subject(self, branch_id: str, subject_id: str, patch: Dict[str, Any]) -> StudySubject:
        branch = self.branches.find_by_id(branch_id)
        subject = branch.subjects.update(subject_id, patch, unique_name=True)
        self.touch(subject, branch)
        return subject

    def remove_subject(self, branch_id: str, subject_id: str) -> None:
        branch = self.branches.find_by_id(branch_id)
        branch.subjects.remove(subject_id)
        self.touch(branch)

    # ── Materials ──

    def add_material(self, branch_id: str, subject_id: str, data: Dict[str, Any]) -> Material:
        branch = self.branches.find_by_id(branch_id)
        subject = branch.subjects.find_by_id(subject_id)
        material = subject.materials.insert(Material(
            title=data.get("title"),
            link=data.get("link"),
            description=data.get("description") or "",
            type=data.get("type") or "other",
            created_at=utcnow(),
        ))
        self.touch(subject, branch)
        return material

    def update_material(self, branch_id: str, subject_id: str, material_id: str, patch: Dict[str, Any]) -> Material:
        branch = self.branches.find_by_id(branch_id)
        subject = branch.subjects.find_by_id(subject_id)
        material = subject.materials.update(material_id, patch)
        self.touch(subject, branch)
        return material

    def remove_material(self, branch_id: str, subject_id: str, material_id: str) -> None:
        branch = self.branches.find_by_id(branch_id)
        subject = branch.subjects.find_by_id(subject_id)
        subject.materials.remove(material_id)
        self.touch(subject, branch)

    def materials(self, branch_id: str, subject_id: str | None = None) -> List[Material]:
        """Материалы ветки (или одной темы), новые сначала"""
        branch = self.branches.find_by_id(branch_id)
        if subject_id is not None:
            subjects = [branch.subjects.find_by_id(subject_id)]
        else:
            subjects = list(branch.subjects)
        result = [m for s in subjects for m in s.materials]
        return sorted(result, key=lambda m: m.created_at, reverse=True)

    # ── Read model ──

    def statistics(self) -> Dict[str, Any]:
        subjects = [s for b in self.branches for s in b.subjects]
        materials = [m for s in subjects for m in s.materials]
        return {
            "total_branches": len(self.branches),
            "active_branches": sum(1 for b in self.branches if b.is_active),
            "total_subjects": len(subjects),
            "active_subjects": sum(1 for s in subjects if s.is_active),
            "total_materials": len(materials),
            "materials_by_type": dict(Counter(m.type for m in materials)),
        }

    # ── Serialization ──

    def body_to_dict(self) -> Dict[str, Any]:
        return {"branches": self.branches.to_list()}

    def load_body(self, body: Dict[str, Any]) -> None:
        self.branches = OwnedCollection.from_list(Branch, body.get("branches"))
