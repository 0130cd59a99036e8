"""
Reference code issuance: ``{PREFIX}-{YEAR}-{NNNNNN}`` per form type and year.

``preview`` is what the "show form" screen displays and reserves nothing.
``issue`` runs inside the header insert transaction and locks the
``code_sequences`` row for the form/year, so two submissions can never
leave with the same number.
"""

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from models import CodeSequence
from services.form_registry import FormDescriptor
from utils.timeutils import utc_now

logger = logging.getLogger(__name__)


def parse_sequence_number(code: Optional[str]) -> int:
    """Numeric suffix of a reference code; anything unparsable counts as 0."""
    if not code:
        return 0
    suffix = code.rsplit("-", 1)[-1].strip()
    if not suffix.isdigit():
        return 0
    return int(suffix)


class CodeSequencer:
    def __init__(self, clock: Callable[[], datetime] = utc_now):
        self.clock = clock

    def current_year(self) -> int:
        return self.clock().year

    def highest_existing(self, db: Session, form: FormDescriptor, year: int) -> int:
        codes: Iterable[str] = db.execute(
            select(form.model.form_code).where(form.model.form_code.like(form.code_like(year)))
        ).scalars()
        return max((parse_sequence_number(code) for code in codes), default=0)

    def preview(self, db: Session, form: FormDescriptor, year: Optional[int] = None) -> str:
        """Next code as of now. Calling it twice without an insert in between returns the same value."""
        year = year or self.current_year()
        sequence = db.get(CodeSequence, (form.key, year))
        last_value = sequence.last_value if sequence is not None else 0
        number = max(last_value, self.highest_existing(db, form, year)) + 1
        return form.format_code(year, number)

    def locked_sequence(self, db: Session, form: FormDescriptor, year: int) -> Optional[CodeSequence]:
        """Counter row for the form and year, read ``FOR UPDATE`` and refreshed from the database."""
        return db.execute(
            select(CodeSequence)
            .where(CodeSequence.form_type == form.key, CodeSequence.year == year)
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()

    def issue(self, db: Session, form: FormDescriptor, year: Optional[int] = None) -> str:
        """
        Reserve the next code inside the caller's transaction.

        The sequence row is read with ``FOR UPDATE``; concurrent issuers for the
        same form and year queue behind it until the first one commits. When
        the row does not exist yet, two first issuers both insert it and the
        later one fails on the primary key. The caller owns commit/rollback.
        """
        year = year or self.current_year()
        sequence = self.locked_sequence(db, form, year)

        if sequence is None:
            sequence = CodeSequence(form_type=form.key, year=year, last_value=0)
            db.add(sequence)

        number = max(sequence.last_value or 0, self.highest_existing(db, form, year)) + 1
        sequence.last_value = number
        db.flush()

        code = form.format_code(year, number)
        logger.info(f"🔢 Issued {code} for {form.key}")
        return code
