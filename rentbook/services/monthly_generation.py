"""Monthly rent generation.

Creates one pending rent record per active tenant for a billing month. The
batch is best-effort: every tenant is an independent insert, tenants that
already have a record for the month are skipped, and failures are collected
rather than aborting the run.
"""
import logging

from ..errors import Conflict, RentbookError
from ..extensions import db
from ..models import STATUS_PENDING, Tenant
from ..utils.validation import validate_month
from . import rent_service
from .results import BatchResult, ItemResult

log = logging.getLogger(__name__)


def generate_monthly(month: str) -> BatchResult:
    validate_month(month)

    # snapshot tenant fields; a rollback below expires loaded instances
    tenants = [
        (t.id, t.name, t.monthly_rent)
        for t in Tenant.query.filter_by(is_active=True).order_by(Tenant.id).all()
    ]

    result = BatchResult()
    for tenant_id, name, monthly_rent in tenants:
        info = {"tenant_id": tenant_id, "tenant_name": name}
        if rent_service.record_exists(tenant_id, month):
            result.add(ItemResult.skipped(**info))
            continue
        try:
            record = rent_service.create_rent_record({
                "tenant_id": tenant_id,
                "month": month,
                "rent_amount": monthly_rent,
                "light_bill_amount": 0,
                "status": STATUS_PENDING,
            })
        except Conflict:
            # created concurrently by another run
            result.add(ItemResult.skipped(**info))
        except Exception as e:
            db.session.rollback()
            message = e.message if isinstance(e, RentbookError) else str(e)
            log.warning("Rent generation failed for tenant %s: %s", tenant_id, message)
            result.add(ItemResult.failed(
                f"Failed to generate rent record for {name}: {message}", **info
            ))
        else:
            result.add(ItemResult.done(record, rent_id=record.id, **info))

    log.info(
        "Monthly generation for %s: %d created, %d skipped, %d failed",
        month, len(result.done), len(result.skipped), len(result.failed),
    )
    return result
