"""
Study structure API endpoints (branches → subjects → materials)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.study import StudyStructureService
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/study-structure", tags=["study"])


# === Request models ===

class NamedIn(RequestModel):
    name: str
    description: str = ""


class UpdateNamedRequest(RequestModel):
    name: str | None = None
    description: str | None = None
    is_active: bool | None = None


class MaterialIn(RequestModel):
    title: str
    link: str
    description: str = ""
    type: str = "other"


class UpdateMaterialRequest(RequestModel):
    title: str | None = None
    link: str | None = None
    description: str | None = None
    type: str | None = None


# === Endpoints ===

@router.get("")
def get_structure(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    """Вся структура пользователя (создаётся пустой при первом обращении)"""
    return ok(StudyStructureService(db).get_structure(user.id).to_response())


@router.get("/statistics")
def get_statistics(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(StudyStructureService(db).statistics(user.id))


# --- Branches ---

@router.post("/branches")
def create_branch(req: NamedIn, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    branch = StudyStructureService(db).add_branch(user.id, req.name, req.description)
    return created(branch.to_dict())


@router.put("/branches/{branch_id}")
def update_branch(
    branch_id: str,
    req: UpdateNamedRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    branch = StudyStructureService(db).update_branch(user.id, branch_id, req.changes())
    return ok(branch.to_dict())


@router.delete("/branches/{branch_id}")
def delete_branch(branch_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    StudyStructureService(db).remove_branch(user.id, branch_id)
    return ok({})


# --- Subjects ---

@router.post("/branches/{branch_id}/subjects")
def create_subject(
    branch_id: str,
    req: NamedIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    subject = StudyStructureService(db).add_subject(user.id, branch_id, req.name, req.description)
    return created(subject.to_dict())


@router.put("/branches/{branch_id}/subjects/{subject_id}")
def update_subject(
    branch_id: str,
    subject_id: str,
    req: UpdateNamedRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    subject = StudyStructureService(db).update_subject(user.id, branch_id, subject_id, req.changes())
    return ok(subject.to_dict())


@router.delete("/branches/{branch_id}/subjects/{subject_id}")
def delete_subject(
    branch_id: str,
    subject_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    StudyStructureService(db).remove_subject(user.id, branch_id, subject_id)
    return ok({})


# --- Materials ---

@router.get("/branches/{branch_id}/materials")
def list_materials(
    branch_id: str,
    subject_id: str | None = None,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    materials = StudyStructureService(db).list_materials(user.id, branch_id, subject_id)
    return ok([m.to_dict() for m in materials], count=len(materials))


@router.post("/branches/{branch_id}/subjects/{subject_id}/materials")
def create_material(
    branch_id: str,
    subject_id: str,
    req: MaterialIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    material = StudyStructureService(db).add_material(user.id, branch_id, subject_id, req.model_dump())
    return created(material.to_dict())


@router.put("/branches/{branch_id}/subjects/{subject_id}/materials/{material_id}")
def update_material(
    branch_id: str,
    subject_id: str,
    material_id: str,
    req: UpdateMaterialRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    material = StudyStructureService(db).update_material(
        user.id, branch_id, subject_id, material_id, req.changes()
    )
    return ok(material.to_dict())


@router.delete("/branches/{branch_id}/subjects/{subject_id}/materials/{material_id}")
def delete_material(
    branch_id: str,
    subject_id: str,
    material_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    StudyStructureService(db).remove_material(user.id, branch_id, subject_id, material_id)
    return ok({})
