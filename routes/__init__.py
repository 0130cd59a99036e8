# routes/__init__.py

from .forms import router as forms_router
from .dashboard import router as dashboard_router
from .reports import router as reports_router
from .admin import router as admin_router
from .branches import router as branches_router
from .leave import router as leave_router

__all__ = [
    'forms_router',
    'dashboard_router',
    'reports_router',
    'admin_router',
    'branches_router',
    'leave_router'
]
