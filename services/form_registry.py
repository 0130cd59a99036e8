"""
Form registry: one descriptor per form type.

Every generic operation (code issuance, storage, status transitions,
dashboard rollups and route registration) is driven from the descriptors
declared here, so adding a form means adding a model and an entry below.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple, Type

from models import (
    PurchaseRequest, PurchaseRequestItem, CashAdvanceRequest, CashAdvanceRequestItem,
    CashAdvanceLiquidation, CashAdvanceLiquidationItem, CAReceipt, Reimbursement,
    RevolvingFund, RevolvingFundItem, PaymentRequest, PaymentRequestItem,
    MaintenanceRepairRequest, OvertimeApprovalRequest, OvertimeEntry, LeaveApplication,
    InterbranchTransferSlip, InterbranchTransferSlipItem, Transmittal, TransmittalItem,
    CreditCardAcknowledgementReceipt
)
from services.errors import FormNotFoundError

PENDING = "Pending"
APPROVED = "Approved"
ENDORSED = "Endorsed"
DECLINED = "Declined"
DISPATCHED = "Dispatched"
RECEIVED = "Received"
COMPLETED = "Completed"
ACCOMPLISHED = "Accomplished"

COMMON_HEADER_FIELDS = ("user_id", "request_by", "employee_id", "branch", "department")
APPROVAL_FIELDS = ("approved_by", "approved_signature")
RECEIPT_FIELDS = ("received_by", "received_signature")
ACCOUNTING_FIELDS = ("check_number", "gl_code", "po_number", "or_number", "completed_by")


@dataclass(frozen=True)
class Transition:
    source: str
    target: str
    required: Tuple[str, ...] = ()
    optional: Tuple[str, ...] = ()
    clears: Tuple[str, ...] = ()

    @property
    def fields(self) -> Tuple[str, ...]:
        return self.required + self.optional


@dataclass(frozen=True)
class FormDescriptor:
    key: str
    title: str
    prefix: str
    pad_width: int
    code_field: str
    model: Type
    header_fields: Tuple[str, ...]
    transitions: Tuple[Transition, ...]
    required_header: Tuple[str, ...] = ("request_by",)
    item_model: Optional[Type] = None
    item_fields: Tuple[str, ...] = ()
    item_required: Tuple[str, ...] = ()
    initial_status: str = PENDING
    _index: Dict[Tuple[str, str], Transition] = field(default_factory=dict, init=False, compare=False, repr=False)

    def __post_init__(self):
        columns = set(self.model.__table__.columns.keys())
        missing = [name for name in self.accepted_header_fields if name not in columns]
        for transition in self.transitions:
            missing.extend(name for name in transition.fields + transition.clears if name not in columns)
            self._index[(transition.source, transition.target)] = transition
        if self.item_model is not None:
            item_columns = set(self.item_model.__table__.columns.keys())
            missing.extend(name for name in self.item_fields if name not in item_columns)
        if missing:
            raise ValueError(f"Form '{self.key}' references unknown columns: {sorted(set(missing))}")

    @property
    def has_items(self) -> bool:
        return self.item_model is not None

    @property
    def accepted_header_fields(self) -> Tuple[str, ...]:
        return COMMON_HEADER_FIELDS + self.header_fields

    @property
    def statuses(self) -> Tuple[str, ...]:
        seen = [self.initial_status]
        for transition in self.transitions:
            for status in (transition.source, transition.target):
                if status not in seen:
                    seen.append(status)
        return tuple(seen)

    def transition(self, source: str, target: str) -> Optional[Transition]:
        return self._index.get((source, target))

    def format_code(self, year: int, number: int) -> str:
        return f"{self.prefix}-{year}-{str(number).zfill(self.pad_width)}"

    def code_like(self, year: int) -> str:
        return f"{self.prefix}-{year}-%"


def approve(target: str = APPROVED, optional: Tuple[str, ...] = ()) -> Transition:
    return Transition(PENDING, target, required=APPROVAL_FIELDS, optional=optional)


def decline() -> Transition:
    return Transition(PENDING, DECLINED, required=("declined_reason",), clears=APPROVAL_FIELDS)


def receive(source: str = APPROVED) -> Transition:
    return Transition(source, RECEIVED, required=RECEIPT_FIELDS)


def complete(source: str, optional: Tuple[str, ...] = ACCOUNTING_FIELDS) -> Transition:
    return Transition(source, COMPLETED, optional=optional)


FORMS: Dict[str, FormDescriptor] = {}


def register(descriptor: FormDescriptor) -> FormDescriptor:
    if descriptor.key in FORMS:
        raise ValueError(f"Form '{descriptor.key}' is already registered")
    FORMS[descriptor.key] = descriptor
    return descriptor


def get_form(key: str) -> FormDescriptor:
    try:
        return FORMS[key]
    except KeyError:
        raise FormNotFoundError(f"Unknown form type '{key}'")


register(FormDescriptor(
    key="purchase_request",
    title="Purchase Request",
    prefix="PR",
    pad_width=6,
    code_field="purchase_request_code",
    model=PurchaseRequest,
    header_fields=("request_date", "contact_number", "address", "purpose"),
    item_model=PurchaseRequestItem,
    item_fields=("purchase_item", "quantity"),
    item_required=("purchase_item", "quantity"),
    transitions=(
        approve(optional=("date_ordered", "po_number")),
        decline(),
        receive(),
        complete(RECEIVED),
    ),
))

register(FormDescriptor(
    key="cash_advance_request",
    title="Cash Advance Request",
    prefix="CA",
    pad_width=6,
    code_field="ca_request_code",
    model=CashAdvanceRequest,
    header_fields=(
        "request_date", "nature_of_activity", "inclusive_date_from",
        "inclusive_date_to", "total_amount", "purpose",
    ),
    item_model=CashAdvanceRequestItem,
    item_fields=("description", "amount", "exp_cat", "store_branch", "remarks"),
    item_required=("amount",),
    transitions=(approve(), decline(), receive(), complete(RECEIVED)),
))

register(FormDescriptor(
    key="cash_advance_liquidation",
    title="Cash Advance Liquidation",
    prefix="CAL",
    pad_width=6,
    code_field="cal_request_code",
    model=CashAdvanceLiquidation,
    header_fields=("ca_request_code", "cash_advance_amount", "total_expense", "balance"),
    item_model=CashAdvanceLiquidationItem,
    item_fields=(
        "transaction_date", "description", "or_no", "amount",
        "exp_charges", "store_branch", "remarks",
    ),
    item_required=("amount",),
    transitions=(approve(), decline(), complete(APPROVED)),
))

register(FormDescriptor(
    key="ca_receipt",
    title="Cash Advance Receipt",
    prefix="CAR",
    pad_width=3,
    code_field="car_request_code",
    model=CAReceipt,
    header_fields=("ca_request_code", "amount", "amount_in_words", "received_date"),
    transitions=(approve(), decline(), receive()),
))

register(FormDescriptor(
    key="revolving_fund",
    title="Revolving Fund Replenishment",
    prefix="RF",
    pad_width=6,
    code_field="rf_request_code",
    model=RevolvingFund,
    header_fields=(
        "custodian", "revolving_fund_amount", "replenish_amount",
        "period_from", "period_to",
    ),
    item_model=RevolvingFundItem,
    item_fields=(
        "entry_date", "voucher_no", "or_ref_no", "amount",
        "expense_category", "gl_account", "remarks",
    ),
    item_required=("amount",),
    transitions=(approve(), decline(), complete(APPROVED)),
))

register(FormDescriptor(
    key="payment_request",
    title="Payment Request",
    prefix="PRF",
    pad_width=6,
    code_field="prf_request_code",
    model=PaymentRequest,
    header_fields=("payee", "request_date", "total_amount", "purpose"),
    item_model=PaymentRequestItem,
    item_fields=("description", "quantity", "unit_price", "amount", "budget_code"),
    item_required=("description", "amount"),
    transitions=(approve(), decline(), complete(APPROVED)),
))

register(FormDescriptor(
    key="reimbursement",
    title="Reimbursement",
    prefix="RB",
    pad_width=6,
    code_field="rb_request_code",
    model=Reimbursement,
    header_fields=("cal_request_code", "total_amount", "purpose"),
    transitions=(approve(), decline(), complete(APPROVED)),
))

register(FormDescriptor(
    key="maintenance_repair_request",
    title="Maintenance / Repair Request",
    prefix="MRR",
    pad_width=6,
    code_field="mrr_request_code",
    model=MaintenanceRepairRequest,
    header_fields=("request_date", "location", "asset_description", "work_description"),
    required_header=("request_by", "work_description"),
    transitions=(
        approve(),
        decline(),
        Transition(
            APPROVED, ACCOMPLISHED,
            required=("accomplished_by",),
            optional=("performed_by", "date_completed", "remarks"),
        ),
    ),
))

register(FormDescriptor(
    key="overtime_approval_request",
    title="Overtime Approval Request",
    prefix="OT",
    pad_width=6,
    code_field="overtime_request_code",
    model=OvertimeApprovalRequest,
    header_fields=("cutoff_from", "cutoff_to", "total_hours"),
    item_model=OvertimeEntry,
    item_fields=("ot_date", "time_from", "time_to", "hours", "purpose"),
    item_required=("ot_date", "hours"),
    transitions=(approve(ENDORSED), decline(), complete(ENDORSED, optional=("completed_by",))),
))

register(FormDescriptor(
    key="leave_application",
    title="Leave Application",
    prefix="LA",
    pad_width=3,
    code_field="leave_request_code",
    model=LeaveApplication,
    header_fields=("leave_type", "date_from", "date_to", "days", "reason"),
    required_header=("request_by", "leave_type", "date_from", "date_to"),
    transitions=(approve(), decline()),
))

register(FormDescriptor(
    key="interbranch_transfer_slip",
    title="Interbranch Transfer Slip",
    prefix="ITS",
    pad_width=6,
    code_field="its_request_code",
    model=InterbranchTransferSlip,
    header_fields=("from_branch", "to_branch", "transfer_date", "purpose"),
    required_header=("request_by", "from_branch", "to_branch"),
    item_model=InterbranchTransferSlipItem,
    item_fields=("item_code", "description", "quantity", "unit", "remarks"),
    item_required=("description", "quantity"),
    transitions=(
        approve(),
        decline(),
        Transition(APPROVED, DISPATCHED, required=("dispatched_by", "dispatched_signature")),
        receive(DISPATCHED),
    ),
))

register(FormDescriptor(
    key="transmittals",
    title="Transmittal",
    prefix="TR",
    pad_width=3,
    code_field="form_code",
    model=Transmittal,
    header_fields=("recipient", "recipient_branch", "purpose"),
    item_model=TransmittalItem,
    item_fields=("reference_no", "description", "quantity", "remarks"),
    item_required=("description",),
    transitions=(receive(PENDING), decline()),
))

register(FormDescriptor(
    key="credit_card_acknowledgement_receipt",
    title="Credit Card Acknowledgement Receipt",
    prefix="CCAR",
    pad_width=3,
    code_field="ccar_request_code",
    model=CreditCardAcknowledgementReceipt,
    header_fields=("card_holder", "card_last_digits", "amount", "purpose"),
    transitions=(approve(), decline(), receive()),
))
