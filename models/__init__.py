from .purchase import PurchaseRequest, PurchaseRequestItem
from .cash_advance import (
    CashAdvanceRequest, CashAdvanceRequestItem, CashAdvanceLiquidation,
    CashAdvanceLiquidationItem, CAReceipt, Reimbursement
)
from .revolving_fund import RevolvingFund, RevolvingFundItem
from .payment import PaymentRequest, PaymentRequestItem
from .maintenance import MaintenanceRepairRequest
from .overtime import OvertimeApprovalRequest, OvertimeEntry
from .leave import LeaveApplication, LeaveType, UserLeave
from .interbranch import InterbranchTransferSlip, InterbranchTransferSlipItem
from .transmittal import Transmittal, TransmittalItem
from .credit_card import CreditCardAcknowledgementReceipt
from .sequence import CodeSequence
from .user import User, UserAccess
from .org import Branch, Department, ExpenseCategory

__all__ = [
    "PurchaseRequest", "PurchaseRequestItem", "CashAdvanceRequest",
    "CashAdvanceRequestItem", "CashAdvanceLiquidation", "CashAdvanceLiquidationItem",
    "CAReceipt", "Reimbursement", "RevolvingFund", "RevolvingFundItem",
    "PaymentRequest", "PaymentRequestItem", "MaintenanceRepairRequest",
    "OvertimeApprovalRequest", "OvertimeEntry", "LeaveApplication",
    "InterbranchTransferSlip", "InterbranchTransferSlipItem", "Transmittal",
    "TransmittalItem", "CreditCardAcknowledgementReceipt", "CodeSequence",
    "User", "UserAccess", "Branch", "Department", "LeaveType", "UserLeave",
    "ExpenseCategory"
]
