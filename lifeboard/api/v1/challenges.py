"""
Challenge API endpoints (challenge → sections → subjects)
"""
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from lifeboard.api.deps import get_db, get_current_user
from lifeboard.api.responses import RequestModel, ok, created
from lifeboard.application.challenges import ChallengeService
from lifeboard.infrastructure.db.models import User


router = APIRouter(prefix="/api/challenges", tags=["challenges"])


# === Request models ===

class ResourceIn(RequestModel):
    title: str = ""
    url: str = ""
    type: str = "other"


class SubjectIn(RequestModel):
    name: str
    description: str = ""
    start_date: str | None = None
    end_date: str | None = None


class SectionIn(RequestModel):
    name: str
    description: str = ""
    subjects: list[SubjectIn] = []


class CreateChallengeRequest(RequestModel):
    name: str
    description: str = ""
    status: str = "active"
    start_date: str | None = None
    end_date: str | None = None
    sections: list[SectionIn] = []


class UpdateChallengeRequest(RequestModel):
    name: str | None = None
    description: str | None = None
    status: str | None = None
    end_date: str | None = None


class UpdateSectionRequest(RequestModel):
    name: str | None = None
    description: str | None = None
    progress: int | None = None


class SubjectBatchRequest(RequestModel):
    subjects: list[SubjectIn]


class UpdateSubjectRequest(RequestModel):
    name: str | None = None
    description: str | None = None
    status: str | None = None
    progress: int | None = None
    start_date: str | None = None
    end_date: str | None = None
    resources: list[ResourceIn] | None = None


# === Endpoints ===

@router.post("")
def create_challenge(req: CreateChallengeRequest, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    challenge = ChallengeService(db).create(
        user.id,
        name=req.name,
        description=req.description,
        status=req.status,
        start_date=req.start_date,
        end_date=req.end_date,
        sections=[s.model_dump() for s in req.sections],
    )
    return created(challenge.to_response())


@router.get("")
def list_challenges(user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    challenges = ChallengeService(db).list(user.id)
    return ok([c.to_response() for c in challenges], count=len(challenges))


@router.get("/{challenge_id}")
def get_challenge(challenge_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    return ok(ChallengeService(db).get(user.id, challenge_id).to_response())


@router.put("/{challenge_id}")
def update_challenge(
    challenge_id: str,
    req: UpdateChallengeRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    challenge = ChallengeService(db).update(user.id, challenge_id, req.changes())
    return ok(challenge.to_response())


@router.delete("/{challenge_id}")
def delete_challenge(challenge_id: str, user: User = Depends(get_current_user), db: Session = Depends(get_db)):
    ChallengeService(db).delete(user.id, challenge_id)
    return ok({})


# --- Sections ---

@router.post("/{challenge_id}/sections")
def add_section(
    challenge_id: str,
    req: SectionIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    section = ChallengeService(db).add_section(
        user.id, challenge_id, req.name, req.description,
        subjects=[s.model_dump() for s in req.subjects],
    )
    return created(section.to_dict())


@router.put("/{challenge_id}/sections/{section_id}")
def update_section(
    challenge_id: str,
    section_id: str,
    req: UpdateSectionRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    section = ChallengeService(db).update_section(user.id, challenge_id, section_id, req.changes())
    return ok(section.to_dict())


@router.delete("/{challenge_id}/sections/{section_id}")
def delete_section(
    challenge_id: str,
    section_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    challenge = ChallengeService(db).remove_section(user.id, challenge_id, section_id)
    return ok(challenge.to_response())


# --- Subjects ---

@router.post("/{challenge_id}/sections/{section_id}/subjects")
def add_subject(
    challenge_id: str,
    section_id: str,
    req: SubjectIn,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    subject = ChallengeService(db).add_subject(user.id, challenge_id, section_id, req.model_dump())
    return created(subject.to_dict())


@router.post("/{challenge_id}/sections/{section_id}/subjects/batch")
def add_subjects_batch(
    challenge_id: str,
    section_id: str,
    req: SubjectBatchRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Пакетное добавление тем: все или ни одной"""
    subjects = ChallengeService(db).add_subjects(
        user.id, challenge_id, section_id, [s.model_dump() for s in req.subjects]
    )
    return ok([s.to_dict() for s in subjects], count=len(subjects), status_code=201)


@router.put("/{challenge_id}/sections/{section_id}/subjects/{subject_id}")
def update_subject(
    challenge_id: str,
    section_id: str,
    subject_id: str,
    req: UpdateSubjectRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    subject = ChallengeService(db).update_subject(user.id, challenge_id, section_id, subject_id, req.changes())
    return ok(subject.to_dict())


@router.delete("/{challenge_id}/sections/{section_id}/subjects/{subject_id}")
def delete_subject(
    challenge_id: str,
    section_id: str,
    subject_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    section = ChallengeService(db).remove_subject(user.id, challenge_id, section_id, subject_id)
    return ok(section.to_dict())
