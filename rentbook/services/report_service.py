"""Read-side aggregations over rent records and tenants.

"Overdue" here is derived at query time: a record is overdue when it is still
pending and its month is before the current month. Nothing stores it.
"""
from decimal import Decimal

from sqlalchemy import func

from ..errors import ValidationError
from ..extensions import db
from ..models import STATUS_OVERDUE, STATUS_PAID, STATUS_PENDING, STATUSES, RentRecord, Tenant
from ..utils.months import current_month, month_start, year_months
from ..utils.validation import validate_month

ZERO = Decimal("0")


def _f(value) -> float:
    return float(value or 0)


def _month_totals(records) -> dict:
    totals = {
        "total_records": 0,
        "total_rent_amount": ZERO,
        "total_light_bill_amount": ZERO,
        "total_amount": ZERO,
        "paid_amount": ZERO,
        "pending_amount": ZERO,
        "overdue_amount": ZERO,
        "status_breakdown": {s: 0 for s in STATUSES},
    }
    for r in records:
        totals["total_records"] += 1
        totals["total_rent_amount"] += r.rent_amount
        totals["total_light_bill_amount"] += r.light_bill_amount
        totals["total_amount"] += r.total_amount
        totals["status_breakdown"][r.status] += 1
        totals[f"{r.status}_amount"] += r.total_amount
    return totals


def _jsonable(totals: dict) -> dict:
    return {k: (float(v) if isinstance(v, Decimal) else v) for k, v in totals.items()}


def month_summary(month: str) -> dict:
    validate_month(month)
    records = RentRecord.query.filter_by(month=month).all()
    return {"month": month, **_jsonable(_month_totals(records))}


def overdue_records(today=None) -> list:
    """Pending records for months before the current one, oldest first."""
    return (
        RentRecord.query
        .filter(RentRecord.status == STATUS_PENDING, RentRecord.month < current_month(today))
        .order_by(RentRecord.month, RentRecord.id)
        .all()
    )


def yearly_report(year: int) -> dict:
    if not 1 <= year <= 9999:
        message = "Year must be between 1 and 9999"
        raise ValidationError(message, {"year": message})
    months = year_months(year)
    records = (
        RentRecord.query
        .filter(RentRecord.month >= months[0], RentRecord.month <= months[-1])
        .all()
    )
    by_month = {m: [] for m in months}
    for r in records:
        by_month[r.month].append(r)

    monthly = []
    for m in months:
        rows = by_month[m]
        monthly.append({
            "month": m,
            "month_name": month_start(m).strftime("%b"),
            "total_rent": _f(sum((r.rent_amount for r in rows), ZERO)),
            "total_light_bill": _f(sum((r.light_bill_amount for r in rows), ZERO)),
            "total_amount": _f(sum((r.total_amount for r in rows), ZERO)),
            "paid_amount": _f(sum((r.total_amount for r in rows if r.status == STATUS_PAID), ZERO)),
            "pending_amount": _f(sum((r.total_amount for r in rows if r.status == STATUS_PENDING), ZERO)),
            "record_count": len(rows),
        })

    def _sum(status, attr="total_amount"):
        return _f(sum((getattr(r, attr) for r in records if r.status == status), ZERO))

    return {
        "year": year,
        "monthly": monthly,
        "totals": {
            "total_rent_collected": _sum(STATUS_PAID),
            "total_rent_pending": _sum(STATUS_PENDING),
            "total_rent_overdue": _sum(STATUS_OVERDUE),
            "total_light_bill_collected": _sum(STATUS_PAID, "light_bill_amount"),
            "total_records": len(records),
            "paid_records": sum(1 for r in records if r.status == STATUS_PAID),
            "pending_records": sum(1 for r in records if r.status == STATUS_PENDING),
            "overdue_records": sum(1 for r in records if r.status == STATUS_OVERDUE),
        },
    }


def tenant_stats() -> dict:
    q = db.session.query
    active = Tenant.is_active.is_(True)
    return {
        "total_tenants": q(func.count(Tenant.id)).scalar() or 0,
        "active_tenants": q(func.count(Tenant.id)).filter(active).scalar() or 0,
        "inactive_tenants": q(func.count(Tenant.id)).filter(Tenant.is_active.is_(False)).scalar() or 0,
        "total_deposit": _f(q(func.sum(Tenant.deposit)).scalar()),
        "total_monthly_rent": _f(q(func.sum(Tenant.monthly_rent)).filter(active).scalar()),
        "agreements_done": q(func.count(Tenant.id)).filter(Tenant.agreement_done.is_(True)).scalar() or 0,
        "agreements_pending": q(func.count(Tenant.id)).filter(Tenant.agreement_done.is_(False)).scalar() or 0,
    }


def dashboard(today=None) -> dict:
    month = current_month(today)
    totals = _month_totals(RentRecord.query.filter_by(month=month).all())
    stats = tenant_stats()
    return {
        "month": month,
        "total_tenants": stats["total_tenants"],
        "active_tenants": stats["active_tenants"],
        "total_rent": _f(totals["total_amount"]),
        "paid_rent": _f(totals["paid_amount"]),
        "pending_rent": _f(totals["pending_amount"]),
        "overdue_rent": _f(totals["overdue_amount"]),
        "overdue_records": len(overdue_records(today)),
    }
