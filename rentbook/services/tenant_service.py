import logging
import math

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from ..errors import Conflict, NotFound, ValidationError
from ..extensions import db
from ..models import Tenant

log = logging.getLogger(__name__)

TENANT_STATUS_FILTERS = ("active", "inactive", "all")


def get_tenant(tenant_id) -> Tenant:
    tenant = db.session.get(Tenant, tenant_id)
    if tenant is None:
        raise NotFound("Tenant not found")
    return tenant


def list_tenants(search="", status="active", page=1, limit=10):
    if status not in TENANT_STATUS_FILTERS:
        message = "Status must be one of: active, inactive, all"
        raise ValidationError(message, {"status": message})

    query = Tenant.query
    if search:
        # user input is matched literally
        term = search.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        like = f"%{term}%"
        query = query.filter(or_(
            Tenant.name.ilike(like, escape="\\"),
            Tenant.contact_number.ilike(like, escape="\\"),
            Tenant.address.ilike(like, escape="\\"),
        ))
    if status != "all":
        query = query.filter(Tenant.is_active == (status == "active"))

    total = query.count()
    items = (
        query.order_by(Tenant.created_at.desc(), Tenant.id.desc())
        .limit(limit)
        .offset((page - 1) * limit)
        .all()
    )
    return {
        "tenants": items,
        "total": total,
        "total_pages": math.ceil(total / limit) if total else 0,
        "current_page": page,
    }


def _check_kyc_unique(data, exclude_id=None):
    errors = {}
    for field in ("aadhaar_number", "pan_number"):
        query = Tenant.query.filter(getattr(Tenant, field) == data[field])
        if exclude_id is not None:
            query = query.filter(Tenant.id != exclude_id)
        if query.first() is not None:
            errors[field] = "Already registered to another tenant"
    if errors:
        raise Conflict("Duplicate KYC number", errors)


def _apply(tenant, data):
    for field in (
        "name", "address", "contact_number", "aadhaar_number", "pan_number",
        "monthly_rent", "deposit", "accommodation_from_date",
        "agreement_done", "agreement_date",
    ):
        setattr(tenant, field, data[field])
    if not tenant.agreement_done:
        tenant.agreement_date = None


def _commit():
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise Conflict("Duplicate KYC number")


def create_tenant(data, documents) -> Tenant:
    """Register a tenant from validated `data` and stored document filenames."""
    missing = {
        f: "KYC document file is required"
        for f in ("aadhaar_file", "pan_file") if not documents.get(f)
    }
    if missing:
        raise ValidationError("KYC documents are required", missing)
    _check_kyc_unique(data)

    tenant = Tenant(is_active=True)
    _apply(tenant, data)
    tenant.aadhaar_file = documents["aadhaar_file"]
    tenant.pan_file = documents["pan_file"]
    tenant.photo = documents.get("photo")

    db.session.add(tenant)
    _commit()
    log.info("Registered tenant %s (%s)", tenant.id, tenant.name)
    return tenant


def update_tenant(tenant_id, data, documents) -> Tenant:
    tenant = get_tenant(tenant_id)
    _check_kyc_unique(data, exclude_id=tenant.id)
    _apply(tenant, data)
    # keep existing files unless replaced
    for column, filename in documents.items():
        setattr(tenant, column, filename)
    _commit()
    return tenant


def toggle_active(tenant_id) -> Tenant:
    tenant = get_tenant(tenant_id)
    tenant.is_active = not tenant.is_active
    db.session.commit()
    log.info("Tenant %s is_active=%s", tenant.id, tenant.is_active)
    return tenant


def deactivate_tenant(tenant_id) -> Tenant:
    # Soft delete - just mark as inactive
    tenant = get_tenant(tenant_id)
    tenant.is_active = False
    db.session.commit()
    return tenant
