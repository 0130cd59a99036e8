# routes/forms.py
"""
HTTP surface for every registered form type.

The same five endpoint shapes are generated per form from the registry:
next-code preview, submit, list, items and status update (plus a detail
lookup by reference code).
"""

from fastapi import APIRouter, Body, Depends, Query
from sqlalchemy.orm import Session
from typing import Any, Dict, Optional

from database import get_db
from services.errors import FormValidationError
from services.form_registry import FORMS, FormDescriptor
from services.request_store import RequestStore, serialize_request
from services.status_machine import StatusMachine

router = APIRouter()

store = RequestStore()
status_machine = StatusMachine(store)

META_FIELDS = ("status", "form_code", "items")


def _register_form_routes(form: FormDescriptor):
    key = form.key
    tags = [form.title]

    @router.get(f"/{key}/next-code", tags=tags, name=f"{key}_next_code")
    def next_code(db: Session = Depends(get_db)):
        """Preview of the next reference code; nothing is reserved."""
        return {"nextCode": store.sequencer.preview(db, form)}

    @router.post(f"/{key}", status_code=201, tags=tags, name=f"create_{key}")
    def create_request(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
        record = store.create_request(db, form, payload, payload.get("items"))
        return {
            "success": True,
            "message": f"{form.title} {record.form_code} saved successfully!",
            "id": record.id,
            "form_code": record.form_code,
            form.code_field: record.form_code,
        }

    @router.get(f"/{key}", tags=tags, name=f"list_{key}")
    def list_requests(
        status: Optional[str] = Query(None),
        user_id: Optional[int] = Query(None),
        branch: Optional[str] = Query(None),
        department: Optional[str] = Query(None),
        db: Session = Depends(get_db),
    ):
        filters = {"status": status, "user_id": user_id, "branch": branch, "department": department}
        return [serialize_request(form, record) for record in store.list_requests(db, form, filters)]

    if form.has_items:
        @router.get(f"/{key}_items", tags=tags, name=f"{key}_items")
        def list_items(request_id: Optional[int] = Query(None), db: Session = Depends(get_db)):
            return [item.to_dict() for item in store.get_request_items(db, form, request_id)]

    @router.get(f"/{key}/{{form_code}}", tags=tags, name=f"get_{key}")
    def get_request(form_code: str, db: Session = Depends(get_db)):
        return serialize_request(form, store.get_request(db, form, form_code))

    @router.put(f"/update_{key}", tags=tags, name=f"update_{key}")
    def update_status(payload: Dict[str, Any] = Body(...), db: Session = Depends(get_db)):
        form_code = payload.get(form.code_field) or payload.get("form_code")
        if not form_code:
            raise FormValidationError(f"'{form.code_field}' is required")
        if not payload.get("status"):
            raise FormValidationError("'status' is required")

        fields = {
            name: value for name, value in payload.items()
            if name not in META_FIELDS and name != form.code_field
        }
        record = status_machine.apply_transition(db, form, str(form_code), str(payload["status"]), fields)
        return serialize_request(form, record)


for _form in FORMS.values():
    _register_form_routes(_form)
