# rentbook/routes/tenants.py
from flask import Blueprint, current_app, jsonify, request

from ..services import tenant_service
from ..utils.uploads import DOCUMENT_FIELDS, check_uploads, remove_uploads, save_documents
from ..utils.validation import pagination_args, validate_tenant_payload

bp = Blueprint("tenants", __name__)


def _payload():
    # multipart form data carries the KYC documents
    if request.content_type and request.content_type.startswith('multipart/form-data'):
        return request.form.to_dict(), {f: request.files.get(f) for f in DOCUMENT_FIELDS}
    return request.get_json(silent=True) or {}, {}


def _with_documents(action, data, files):
    check_uploads(files)
    documents = save_documents(files)
    try:
        return action(data, documents)
    except Exception:
        remove_uploads(documents.values())
        raise


@bp.get("/tenants")
def list_tenants():
    page, limit = pagination_args(
        request.args,
        default_limit=current_app.config["DEFAULT_PAGE_SIZE"],
        max_limit=current_app.config["MAX_PAGE_SIZE"],
    )
    result = tenant_service.list_tenants(
        search=(request.args.get("search") or "").strip(),
        status=request.args.get("status") or "active",
        page=page,
        limit=limit,
    )
    result["tenants"] = [t.serialize() for t in result["tenants"]]
    return jsonify(result), 200


@bp.post("/tenants")
def create_tenant():
    raw, files = _payload()
    data = validate_tenant_payload(raw)
    tenant = _with_documents(tenant_service.create_tenant, data, files)
    return jsonify(tenant.serialize()), 201


@bp.get("/tenants/<int:tenant_id>")
def get_tenant(tenant_id):
    return jsonify(tenant_service.get_tenant(tenant_id).serialize()), 200


@bp.put("/tenants/<int:tenant_id>")
def update_tenant(tenant_id):
    tenant_service.get_tenant(tenant_id)
    raw, files = _payload()
    data = validate_tenant_payload(raw)
    tenant = _with_documents(
        lambda d, docs: tenant_service.update_tenant(tenant_id, d, docs), data, files
    )
    return jsonify(tenant.serialize()), 200


@bp.delete("/tenants/<int:tenant_id>")
def delete_tenant(tenant_id):
    tenant_service.deactivate_tenant(tenant_id)
    return jsonify({"message": "Tenant deleted successfully"}), 200


@bp.patch("/tenants/<int:tenant_id>/toggle-status")
def toggle_status(tenant_id):
    tenant = tenant_service.toggle_active(tenant_id)
    return jsonify(tenant.serialize()), 200
