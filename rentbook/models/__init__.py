from .tenant import Tenant
from .rent_record import (
    PAYMENT_METHODS,
    STATUSES,
    STATUS_OVERDUE,
    STATUS_PAID,
    STATUS_PENDING,
    RentRecord,
)
from .hooks import register_model_hooks

__all__ = [
    "Tenant",
    "RentRecord",
    "STATUSES",
    "STATUS_PENDING",
    "STATUS_PAID",
    "STATUS_OVERDUE",
    "PAYMENT_METHODS",
    "register_model_hooks",
]
