"""Input parsing and validation for tenant and rent payloads.

Each ``validate_*`` function collects every field problem before raising a
single :class:`~rentbook.errors.ValidationError` whose ``errors`` dict maps
field names to messages.
"""
import re
from datetime import date, datetime
from decimal import Decimal, InvalidOperation

from ..errors import ValidationError
from ..models import PAYMENT_METHODS, STATUSES

MONTH_RE = re.compile(r"^\d{4}-\d{2}$")
CONTACT_RE = re.compile(r"^[6-9]\d{9}$")
AADHAAR_RE = re.compile(r"^\d{12}$")
PAN_RE = re.compile(r"^[A-Z]{5}[0-9]{4}[A-Z]$")

MONTH_MESSAGE = "Month must be in YYYY-MM format"


def parse_bool(v):
    if isinstance(v, bool):
        return v
    s = str(v or "").strip().lower()
    return s in ("1", "true", "yes", "y", "on")


def parse_amount(v):
    """Non-negative Decimal, or None if `v` is not a valid amount."""
    if v is None or isinstance(v, bool) or str(v).strip() == "":
        return None
    try:
        amount = Decimal(str(v).strip())
    except InvalidOperation:
        return None
    if not amount.is_finite() or amount < 0:
        return None
    return amount


def parse_date(v):
    if isinstance(v, datetime):
        return v.date()
    if isinstance(v, date):
        return v
    s = str(v or "").strip()
    if not s:
        return None
    try:
        return date.fromisoformat(s[:10])
    except ValueError:
        return None


def parse_int(v):
    try:
        return int(str(v).strip())
    except (TypeError, ValueError):
        return None


def is_valid_month(value) -> bool:
    if not isinstance(value, str) or not MONTH_RE.match(value):
        return False
    return 1 <= int(value[5:]) <= 12


def validate_month(value, field="month"):
    if not is_valid_month(value):
        raise ValidationError(MONTH_MESSAGE, {field: MONTH_MESSAGE})
    return value


def validate_tenant_payload(data):
    errors = {}
    clean = {}

    name = str(data.get("name") or "").strip()
    if len(name) < 2:
        errors["name"] = "Name must be at least 2 characters long"
    clean["name"] = name

    address = str(data.get("address") or "").strip()
    if len(address) < 5:
        errors["address"] = "Address must be at least 5 characters long"
    clean["address"] = address

    contact = str(data.get("contact_number") or "").strip()
    if not CONTACT_RE.match(contact):
        errors["contact_number"] = "Contact number must be a valid 10-digit Indian mobile number"
    clean["contact_number"] = contact

    aadhaar = str(data.get("aadhaar_number") or "").strip()
    if not AADHAAR_RE.match(aadhaar):
        errors["aadhaar_number"] = "Aadhaar number must be 12 digits"
    clean["aadhaar_number"] = aadhaar

    pan = str(data.get("pan_number") or "").strip().upper()
    if not PAN_RE.match(pan):
        errors["pan_number"] = "PAN number must be in correct format (e.g., ABCDE1234F)"
    clean["pan_number"] = pan

    for field, label in (("monthly_rent", "Monthly rent"), ("deposit", "Deposit")):
        amount = parse_amount(data.get(field))
        if amount is None:
            errors[field] = f"{label} must be a non-negative number"
        clean[field] = amount

    from_date = parse_date(data.get("accommodation_from_date"))
    if from_date is None:
        errors["accommodation_from_date"] = "Invalid date format"
    clean["accommodation_from_date"] = from_date

    agreement_done = parse_bool(data.get("agreement_done"))
    agreement_date = None
    if agreement_done and data.get("agreement_date"):
        agreement_date = parse_date(data.get("agreement_date"))
        if agreement_date is None:
            errors["agreement_date"] = "Invalid date format"
    clean["agreement_done"] = agreement_done
    clean["agreement_date"] = agreement_date

    if errors:
        raise ValidationError("Invalid tenant data", errors)
    return clean


def validate_rent_payload(data, partial=False):
    """Validate a rent record payload.

    With ``partial=True`` only the fields present are checked and returned;
    ``tenant_id`` and ``month`` are not accepted on update.
    """
    errors = {}
    clean = {}

    if not partial:
        tenant_id = parse_int(data.get("tenant_id"))
        if tenant_id is None:
            errors["tenant_id"] = "Valid tenant ID is required"
        clean["tenant_id"] = tenant_id

        month = data.get("month")
        if not is_valid_month(month):
            errors["month"] = MONTH_MESSAGE
        clean["month"] = month

    if not partial or "rent_amount" in data:
        rent_amount = parse_amount(data.get("rent_amount"))
        if rent_amount is None:
            errors["rent_amount"] = "Rent amount must be a non-negative number"
        clean["rent_amount"] = rent_amount

    if "light_bill_amount" in data and data.get("light_bill_amount") not in (None, ""):
        light_bill = parse_amount(data.get("light_bill_amount"))
        if light_bill is None:
            errors["light_bill_amount"] = "Light bill amount must be a non-negative number"
        clean["light_bill_amount"] = light_bill
    elif not partial:
        clean["light_bill_amount"] = Decimal("0")

    if data.get("payment_method"):
        try:
            clean["payment_method"] = validate_payment_method(data.get("payment_method"))
        except ValidationError as e:
            errors.update(e.errors)

    if "notes" in data:
        notes = data.get("notes")
        clean["notes"] = str(notes).strip() if notes is not None else None

    if errors:
        raise ValidationError("Invalid rent record data", errors)
    return clean


def validate_payment_method(value):
    if value not in PAYMENT_METHODS:
        message = "Invalid payment method"
        raise ValidationError(message, {"payment_method": message})
    return value


def validate_status_filter(value):
    if value in (None, "", "all"):
        return None
    if value not in STATUSES:
        message = "Status must be one of: all, " + ", ".join(STATUSES)
        raise ValidationError(message, {"status": message})
    return value


def pagination_args(args, default_limit=10, max_limit=1000):
    page = parse_int(args.get("page"))
    limit = parse_int(args.get("limit"))
    page = page if page and page > 0 else 1
    limit = max(1, min(limit, max_limit)) if limit else default_limit
    return page, limit
