"""
Diary use cases - entries with good/bad things lists, paginated listing,
date-range and single-day lookups.
"""
import logging
from datetime import datetime, time, timedelta, timezone
from typing import Any, Dict, List, Tuple

from sqlalchemy.orm import Session

from lifeboard.config import get_settings
from lifeboard.domain.errors import ValidationError, NotFoundError
from lifeboard.infrastructure.db.models import DiaryEntryModel
from lifeboard.utils.dates import parse_datetime, parse_day, utcnow
from lifeboard.utils.validation import require_text

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    "date": DiaryEntryModel.date,
    "createdAt": DiaryEntryModel.created_at,
    "created_at": DiaryEntryModel.created_at,
}


def _string_list(value, label: str) -> List[str]:
    if value is None:
        return []
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ValidationError(f"{label} must be a list of strings")
    return [v.strip() for v in value if v.strip()]


def _get_owned(db: Session, owner_id: int, entry_id: int) -> DiaryEntryModel:
    entry = db.query(DiaryEntryModel).filter(
        DiaryEntryModel.id == entry_id,
        DiaryEntryModel.owner_id == owner_id,
    ).first()
    if not entry:
        raise NotFoundError("Diary entry not found")
    return entry


def serialize_entry(entry: DiaryEntryModel) -> Dict[str, Any]:
    return {
        "id": entry.id,
        "date": entry.date.isoformat() if entry.date else None,
        "content": entry.content,
        "good_things": list(entry.good_things or []),
        "bad_things": list(entry.bad_things or []),
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
        "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
    }


class CreateDiaryEntryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, content: str, date=None, good_things=None, bad_things=None) -> DiaryEntryModel:
        entry = DiaryEntryModel(
            owner_id=owner_id,
            date=parse_datetime(date, "date") if date else utcnow(),
            content=require_text(content, "Please add some content"),
            good_things=_string_list(good_things, "Good things"),
            bad_things=_string_list(bad_things, "Bad things"),
        )
        self.db.add(entry)
        self.db.commit()
        logger.info("Diary entry %s created for user %s", entry.id, owner_id)
        return entry


class UpdateDiaryEntryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, entry_id: int, **changes) -> DiaryEntryModel:
        entry = _get_owned(self.db, owner_id, entry_id)
        if "content" in changes:
            entry.content = require_text(changes["content"], "Please add some content")
        if "good_things" in changes:
            entry.good_things = _string_list(changes["good_things"], "Good things")
        if "bad_things" in changes:
            entry.bad_things = _string_list(changes["bad_things"], "Bad things")
        if "date" in changes:
            entry.date = parse_datetime(changes["date"], "date")
        entry.updated_at = utcnow()
        self.db.commit()
        return entry


class DeleteDiaryEntryUseCase:
    def __init__(self, db: Session):
        self.db = db

    def execute(self, owner_id: int, entry_id: int) -> None:
        entry = _get_owned(self.db, owner_id, entry_id)
        self.db.delete(entry)
        self.db.commit()
        logger.info("Diary entry %s deleted by user %s", entry_id, owner_id)


class DiaryQuery:
    def __init__(self, db: Session):
        self.db = db

    def get(self, owner_id: int, entry_id: int) -> DiaryEntryModel:
        return _get_owned(self.db, owner_id, entry_id)

    def list_page(
        self, owner_id: int, page: int = 1, limit: int | None = None, sort: str | None = None
    ) -> Tuple[List[DiaryEntryModel], Dict[str, Any], int]:
        """
        Страница записей

        sort: имя поля, "-" в начале = по убыванию (по умолчанию -createdAt)

        Returns:
            (записи, pagination {"next"/"prev": {"page", "limit"}}, total)
        """
        page = max(int(page or 1), 1)
        limit = int(limit or get_settings().DIARY_PAGE_SIZE)
        if limit < 1:
            raise ValidationError("Limit must be a positive number")

        sort = sort or "-createdAt"
        descending = sort.startswith("-")
        column = SORT_FIELDS.get(sort.lstrip("-"))
        if column is None:
            raise ValidationError(f"Invalid sort field. Must be one of: {', '.join(SORT_FIELDS)}")
        order = column.desc() if descending else column.asc()
        tiebreak = DiaryEntryModel.id.desc() if descending else DiaryEntryModel.id.asc()

        base = self.db.query(DiaryEntryModel).filter(DiaryEntryModel.owner_id == owner_id)
        total = base.count()
        start = (page - 1) * limit
        entries = base.order_by(order, tiebreak).offset(start).limit(limit).all()

        pagination = {}
        if page * limit < total:
            pagination["next"] = {"page": page + 1, "limit": limit}
        if start > 0:
            pagination["prev"] = {"page": page - 1, "limit": limit}
        return entries, pagination, total

    def list_range(self, owner_id: int, start_date, end_date) -> List[DiaryEntryModel]:
        """Записи в [start_date, end_date], новые сначала; дата без времени = весь день"""
        if not start_date or not end_date:
            raise ValidationError("Please provide both startDate and endDate")
        start = parse_datetime(start_date, "startDate")
        end = parse_datetime(end_date, "endDate")
        if isinstance(end_date, str) and "T" not in end_date:
            end = end + timedelta(days=1) - timedelta(microseconds=1)
        return self.db.query(DiaryEntryModel).filter(
            DiaryEntryModel.owner_id == owner_id,
            DiaryEntryModel.date >= start,
            DiaryEntryModel.date <= end,
        ).order_by(DiaryEntryModel.date.desc()).all()

    def get_by_date(self, owner_id: int, day) -> DiaryEntryModel | None:
        """Первая запись за календарный день (или None)"""
        try:
            day = parse_day(day)
        except ValidationError:
            raise ValidationError("Please provide a valid date") from None
        start = datetime.combine(day, time.min, tzinfo=timezone.utc)
        end = start + timedelta(days=1)
        return self.db.query(DiaryEntryModel).filter(
            DiaryEntryModel.owner_id == owner_id,
            DiaryEntryModel.date >= start,
            DiaryEntryModel.date < end,
        ).order_by(DiaryEntryModel.date.asc()).first()
