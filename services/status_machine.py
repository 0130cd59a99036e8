"""
Status transitions for every form type.

Each form declares its allowed ``(source, target)`` pairs in the registry,
together with the fields the transition must or may carry. The update is
conditional on the prior status, so of two concurrent reviewers only the
first one wins; the second gets a conflict instead of overwriting.
"""

import logging
from typing import Any, Dict, Optional

from sqlalchemy import update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from services.errors import (
    FormConflictError, FormValidationError, InvalidTransitionError, PersistenceError
)
from services.form_registry import FormDescriptor, Transition
from services.request_store import RequestStore, is_blank, coerce_value
from utils.timeutils import utc_now

logger = logging.getLogger(__name__)


class StatusMachine:
    def __init__(self, store: Optional[RequestStore] = None):
        self.store = store or RequestStore()

    def _transition_values(self, form: FormDescriptor, transition: Transition, fields: Dict[str, Any]) -> Dict[str, Any]:
        missing = [name for name in transition.required if is_blank(fields.get(name))]
        if missing:
            raise FormValidationError(
                f"Moving to {transition.target} requires: {', '.join(missing)}"
            )
        columns = form.model.__table__.columns
        values = {name: coerce_value(columns[name], fields[name]) for name in transition.fields if name in fields}
        for name in transition.clears:
            values[name] = None
        return values

    def _already_applied(self, form: FormDescriptor, record, fields: Dict[str, Any]) -> bool:
        """True when the record already sits in the target state with these exact fields."""
        transitions = [t for t in form.transitions if t.target == record.status]
        if not transitions:
            # Initial status; nothing a transition could have written
            return True
        columns = form.model.__table__.columns
        for transition in transitions:
            supplied = {name: fields[name] for name in transition.fields if name in fields}
            if all(getattr(record, name) == coerce_value(columns[name], value) for name, value in supplied.items()):
                return True
        return False

    def apply_transition(
        self,
        db: Session,
        form: FormDescriptor,
        form_code: str,
        target_status: str,
        fields: Optional[Dict[str, Any]] = None,
    ):
        """
        Move ``form_code`` to ``target_status``.

        Raises FormNotFoundError for an unknown code, FormValidationError for an
        unknown status or missing required fields, InvalidTransitionError when
        the form does not allow the move and FormConflictError when another
        writer changed the status first. Re-applying the current status with
        identical fields returns the record unchanged.
        """
        fields = dict(fields or {})
        target_status = (target_status or "").strip()
        if target_status not in form.statuses:
            raise FormValidationError(
                f"Unknown status '{target_status}' for {form.title}; expected one of: {', '.join(form.statuses)}"
            )

        record = self.store.get_request(db, form, form_code)
        current_status = record.status

        if current_status == target_status:
            if self._already_applied(form, record, fields):
                logger.info(f"↩️ {form_code} already {target_status}, nothing to do")
                return record
            raise InvalidTransitionError(f"{form.title} {form_code} is already {target_status}")

        transition = form.transition(current_status, target_status)
        if transition is None:
            raise InvalidTransitionError(
                f"{form.title} {form_code} cannot move from {current_status} to {target_status}"
            )

        values = self._transition_values(form, transition, fields)
        values["status"] = target_status
        values["updated_at"] = utc_now()

        model = form.model
        stmt = (
            update(model)
            .where(model.id == record.id, model.status == current_status)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        try:
            result = db.execute(stmt)
            if result.rowcount == 0:
                db.rollback()
                raise FormConflictError(
                    f"{form.title} {form_code} was modified by someone else; reload and try again"
                )
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(f"❌ Error updating {form.key} {form_code}")
            raise PersistenceError(f"Server error updating {form.title.lower()}")

        db.refresh(record)
        logger.info(f"✅ {form.title} {form_code}: {current_status} → {target_status}")
        return record
