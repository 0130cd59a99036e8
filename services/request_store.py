"""
Generic create/read operations over a form's header and item tables.

A submission is one transaction: code issuance, header insert and the bulk
item insert either all commit or all roll back.
"""

import logging
from functools import lru_cache
from typing import Any, Dict, Iterable, List, Optional

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, selectinload, joinedload

from services.code_sequencer import CodeSequencer
from services.errors import FormConflictError, FormNotFoundError, FormValidationError, PersistenceError
from services.form_registry import FormDescriptor

logger = logging.getLogger(__name__)

LIST_FILTERS = ("status", "user_id", "branch", "department")


def is_blank(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


@lru_cache(maxsize=None)
def _adapter(python_type) -> TypeAdapter:
    return TypeAdapter(python_type)


def coerce_value(column, value: Any) -> Any:
    """Convert a JSON value to the column's Python type (dates, decimals, ints)."""
    if is_blank(value):
        return None
    if isinstance(value, str):
        value = value.strip()
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return value
    if python_type is str:
        return str(value)
    try:
        return _adapter(python_type).validate_python(value)
    except ValidationError:
        raise FormValidationError(f"Invalid value for '{column.key}': {value!r}")


def _coerce_fields(model, data: Dict[str, Any], fields: Iterable[str]) -> Dict[str, Any]:
    columns = model.__table__.columns
    return {name: coerce_value(columns[name], data[name]) for name in fields if name in data}


def keep_item(form: FormDescriptor, item: Any) -> bool:
    """An item is kept only when all of the form's primary fields are present."""
    if not isinstance(item, dict):
        return False
    return all(not is_blank(item.get(name)) for name in form.item_required)


def serialize_request(form: FormDescriptor, record) -> Dict[str, Any]:
    data = record.to_dict()
    data["form_type"] = form.key
    data[form.code_field] = record.form_code
    if form.has_items:
        data["items"] = [item.to_dict() for item in record.items]
    return data


class RequestStore:
    def __init__(self, sequencer: Optional[CodeSequencer] = None):
        self.sequencer = sequencer or CodeSequencer()

    def validate_submission(self, form: FormDescriptor, header: Dict[str, Any], items: Optional[List[Any]]):
        missing = [name for name in form.required_header if is_blank(header.get(name))]
        if missing:
            raise FormValidationError(f"Missing required field(s): {', '.join(missing)}")

        values = _coerce_fields(form.model, header, form.accepted_header_fields)

        kept = []
        if form.has_items:
            if items is not None and not isinstance(items, list):
                raise FormValidationError("'items' must be a list")
            for item in items or []:
                if keep_item(form, item):
                    kept.append(_coerce_fields(form.item_model, item, form.item_fields))
            if not kept:
                raise FormValidationError(
                    f"At least one item with {', '.join(form.item_required)} is required"
                )
        return values, kept

    def create_request(
        self,
        db: Session,
        form: FormDescriptor,
        header: Dict[str, Any],
        items: Optional[List[Any]] = None,
    ):
        """
        Validate, issue a code and persist header plus items atomically.

        Returns the stored header. Validation problems raise before anything
        touches the database.
        """
        values, kept_items = self.validate_submission(form, header, items)

        try:
            form_code = self.sequencer.issue(db, form)
            record = form.model(form_code=form_code, status=form.initial_status, **values)
            if form.has_items:
                record.items = [form.item_model(**item) for item in kept_items]
            db.add(record)
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.error(f"❌ Duplicate or invalid {form.key} submission: {str(e)}")
            raise FormConflictError(f"{form.title} could not be saved: it conflicts with an existing record")
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"❌ Error saving {form.key}")
            raise PersistenceError(f"Server error saving {form.title.lower()}")

        db.refresh(record)
        logger.info(f"✅ {form.title} {record.form_code} saved with {len(kept_items)} item(s)")
        return record

    def list_requests(self, db: Session, form: FormDescriptor, filters: Optional[Dict[str, Any]] = None):
        model = form.model
        query = select(model)
        for name, value in (filters or {}).items():
            if name not in LIST_FILTERS or is_blank(value):
                continue
            query = query.where(getattr(model, name) == coerce_value(model.__table__.columns[name], value))
        if form.has_items:
            # One round trip: header LEFT JOIN items
            query = query.options(joinedload(model.items))
        query = query.order_by(model.created_at.desc(), model.id.desc())
        return db.execute(query).unique().scalars().all()

    def get_request(self, db: Session, form: FormDescriptor, form_code: str):
        model = form.model
        query = select(model).where(model.form_code == form_code)
        if form.has_items:
            query = query.options(selectinload(model.items))
        record = db.execute(query).scalar_one_or_none()
        if record is None:
            raise FormNotFoundError(f"{form.title} {form_code} not found")
        return record

    def get_request_items(self, db: Session, form: FormDescriptor, request_id: Optional[int] = None):
        if not form.has_items:
            raise FormNotFoundError(f"{form.title} has no line items")
        item_model = form.item_model
        query = select(item_model)
        if request_id is not None:
            query = query.where(item_model.request_id == request_id)
        return db.execute(query.order_by(item_model.id.asc())).scalars().all()
