import logging
import math

from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, NotFound
from ..extensions import db
from ..models import STATUS_PENDING, RentRecord, Tenant

log = logging.getLogger(__name__)

DUPLICATE_MESSAGE = "Rent record already exists for this tenant and month"


def get_rent_record(record_id) -> RentRecord:
    record = db.session.get(RentRecord, record_id)
    if record is None:
        raise NotFound("Rent record not found")
    return record


def list_rent_records(month=None, status=None, tenant_id=None, page=1, limit=10):
    query = RentRecord.query
    if month:
        query = query.filter(RentRecord.month == month)
    if status:
        query = query.filter(RentRecord.status == status)
    if tenant_id:
        query = query.filter(RentRecord.tenant_id == tenant_id)

    total = query.count()
    items = (
        query.order_by(RentRecord.month.desc(), RentRecord.created_at.desc(), RentRecord.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
        .all()
    )
    return {
        "rent_records": items,
        "total": total,
        "total_pages": math.ceil(total / limit) if total else 0,
        "current_page": page,
    }


def record_exists(tenant_id, month) -> bool:
    return db.session.query(
        RentRecord.query.filter_by(tenant_id=tenant_id, month=month).exists()
    ).scalar()


def create_rent_record(data) -> RentRecord:
    """Create a rent line item; the total is always derived server-side."""
    if db.session.get(Tenant, data["tenant_id"]) is None:
        raise NotFound("Tenant not found")
    if record_exists(data["tenant_id"], data["month"]):
        raise Conflict(DUPLICATE_MESSAGE)

    record = RentRecord(
        tenant_id=data["tenant_id"],
        month=data["month"],
        rent_amount=data["rent_amount"],
        light_bill_amount=data.get("light_bill_amount") or 0,
        status=data.get("status", STATUS_PENDING),
        payment_method=data.get("payment_method") or "cash",
        notes=data.get("notes"),
    )
    record.calculate_total_amount()
    db.session.add(record)
    try:
        db.session.commit()
    except IntegrityError:
        # lost a race on (tenant_id, month)
        db.session.rollback()
        raise Conflict(DUPLICATE_MESSAGE)
    log.info("Created rent record %s for tenant %s, %s", record.id, record.tenant_id, record.month)
    return record


def update_rent_record(record_id, data) -> RentRecord:
    record = get_rent_record(record_id)
    for field in ("rent_amount", "light_bill_amount", "payment_method", "notes"):
        if field in data:
            setattr(record, field, data[field])
    record.calculate_total_amount()
    db.session.commit()
    return record


def mark_paid(record_id, payment_method=None) -> RentRecord:
    record = get_rent_record(record_id)
    record.mark_paid(payment_method=payment_method)
    db.session.commit()
    log.info("Rent record %s marked paid via %s", record.id, record.payment_method)
    return record


def delete_rent_record(record_id):
    record = get_rent_record(record_id)
    db.session.delete(record)
    db.session.commit()
    log.info("Deleted rent record %s", record_id)
