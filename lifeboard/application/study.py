"""
Study structure service - branches → subjects → materials of one owner.

The structure is a singleton per owner (natural key "default"); it is created
empty on first access.
"""
import logging
from typing import Any, Callable, Dict, List, Tuple, TypeVar

from lifeboard.application.documents import DocumentService
from lifeboard.domain.study_structure import StudyStructure, STUDY_STRUCTURE_KEY, Branch, StudySubject, Material

logger = logging.getLogger(__name__)

R = TypeVar("R")


class StudyStructureService(DocumentService[StudyStructure]):
    aggregate_cls = StudyStructure

    def get_structure(self, owner_id: int) -> StudyStructure:
        return self.repo.load_or_create(owner_id, STUDY_STRUCTURE_KEY, lambda: StudyStructure(owner_id))

    def _change(self, owner_id: int, mutate: Callable[[StudyStructure], R]) -> Tuple[StudyStructure, R]:
        structure = self.get_structure(owner_id)
        result = mutate(structure)
        self.repo.save(structure)
        return structure, result

    def statistics(self, owner_id: int) -> Dict[str, Any]:
        return self.get_structure(owner_id).statistics()

    # ── Branches ──

    def add_branch(self, owner_id: int, name: str, description: str = "") -> Branch:
        _, branch = self._change(owner_id, lambda s: s.add_branch(name, description))
        logger.info("Branch %s created for user %s", branch.id, owner_id)
        return branch

    def update_branch(self, owner_id: int, branch_id: str, patch: Dict[str, Any]) -> Branch:
        _, branch = self._change(owner_id, lambda s: s.update_branch(branch_id, patch))
        return branch

    def remove_branch(self, owner_id: int, branch_id: str) -> None:
        """Удаляет ветку вместе со всеми темами и материалами"""
        self._change(owner_id, lambda s: s.remove_branch(branch_id))
        logger.info("Branch %s removed by user %s", branch_id, owner_id)

    # ── Subjects ──

    def add_subject(self, owner_id: int, branch_id: str, name: str, description: str = "") -> StudySubject:
        _, subject = self._change(owner_id, lambda s: s.add_subject(branch_id, name, description))
        return subject

    def update_subject(self, owner_id: int, branch_id: str, subject_id: str, patch: Dict[str, Any]) -> StudySubject:
        _, subject = self._change(owner_id, lambda s: s.update_subject(branch_id, subject_id, patch))
        return subject

    def remove_subject(self, owner_id: int, branch_id: str, subject_id: str) -> None:
        self._change(owner_id, lambda s: s.remove_subject(branch_id, subject_id))

    # ── Materials ──

    def list_materials(self, owner_id: int, branch_id: str, subject_id: str | None = None) -> List[Material]:
        return self.get_structure(owner_id).materials(branch_id, subject_id)

    def add_material(self, owner_id: int, branch_id: str, subject_id: str, data: Dict[str, Any]) -> Material:
        _, material = self._change(owner_id, lambda s: s.add_material(branch_id, subject_id, data))
        return material

    def update_material(
        self, owner_id: int, branch_id: str, subject_id: str, material_id: str, patch: Dict[str, Any]
    ) -> Material:
        _, material = self._change(
            owner_id, lambda s: s.update_material(branch_id, subject_id, material_id, patch)
        )
        return material

    def remove_material(self, owner_id: int, branch_id: str, subject_id: str, material_id: str) -> None:
        self._change(owner_id, lambda s: s.remove_material(branch_id, subject_id, material_id))
