# rentbook/routes/rent.py
from flask import Blueprint, current_app, jsonify, request

from ..services import monthly_generation, rent_service, report_service
from ..utils.validation import (
    pagination_args,
    parse_int,
    validate_month,
    validate_payment_method,
    validate_rent_payload,
    validate_status_filter,
)

bp = Blueprint("rent", __name__)


@bp.get("/rent")
def list_rent_records():
    """Rent records filtered by month, status and tenant"""
    page, limit = pagination_args(
        request.args,
        default_limit=current_app.config["DEFAULT_PAGE_SIZE"],
        max_limit=current_app.config["MAX_PAGE_SIZE"],
    )
    month = request.args.get("month") or None
    if month:
        validate_month(month)
    result = rent_service.list_rent_records(
        month=month,
        status=validate_status_filter(request.args.get("status")),
        tenant_id=parse_int(request.args.get("tenant")) or parse_int(request.args.get("tenant_id")),
        page=page,
        limit=limit,
    )
    result["rent_records"] = [r.serialize() for r in result["rent_records"]]
    return jsonify(result), 200


@bp.post("/rent")
def create_rent_record():
    """Create a rent record; total_amount in the payload is ignored"""
    data = validate_rent_payload(request.get_json(silent=True) or {})
    record = rent_service.create_rent_record(data)
    return jsonify(record.serialize(with_tenant="full")), 201


@bp.get("/rent/<int:rent_id>")
def get_rent_record(rent_id):
    record = rent_service.get_rent_record(rent_id)
    return jsonify(record.serialize(with_tenant="full")), 200


@bp.put("/rent/<int:rent_id>")
def update_rent_record(rent_id):
    data = validate_rent_payload(request.get_json(silent=True) or {}, partial=True)
    record = rent_service.update_rent_record(rent_id, data)
    return jsonify(record.serialize(with_tenant="full")), 200


@bp.patch("/rent/<int:rent_id>/mark-paid")
def mark_paid(rent_id):
    data = request.get_json(silent=True) or {}
    method = data.get("payment_method")
    if method:
        validate_payment_method(method)
    record = rent_service.mark_paid(rent_id, payment_method=method)
    return jsonify(record.serialize(with_tenant="full")), 200


@bp.delete("/rent/<int:rent_id>")
def delete_rent_record(rent_id):
    rent_service.delete_rent_record(rent_id)
    return jsonify({"message": "Rent record deleted successfully"}), 200


@bp.post("/rent/generate-monthly")
def generate_monthly():
    """Create pending rent records for every active tenant"""
    month = (request.get_json(silent=True) or {}).get("month")
    result = monthly_generation.generate_monthly(month)
    created = [item.record.serialize() for item in result.done]
    return jsonify({
        "message": f"Generated {len(created)} rent records for {month}",
        "count": len(created),
        "generated_records": created,
        "skipped": len(result.skipped),
        "errors": [item.error for item in result.failed],
    }), 200


@bp.get("/rent/summary/<month>")
def month_summary(month):
    return jsonify(report_service.month_summary(month)), 200


@bp.get("/rent/overdue/list")
def overdue_list():
    records = report_service.overdue_records()
    return jsonify([r.serialize(with_tenant="full") for r in records]), 200
