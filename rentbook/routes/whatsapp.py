# rentbook/routes/whatsapp.py
from flask import Blueprint, current_app, jsonify, request

from ..services.notification_service import NotificationService
from ..utils.validation import parse_int

bp = Blueprint("whatsapp", __name__)


def _session():
    return current_app.extensions["whatsapp"]


def _notifications():
    return NotificationService(_session(), country_code=current_app.config["WHATSAPP_COUNTRY_CODE"])


@bp.get("/status")
def status():
    return jsonify(_notifications().status()), 200


@bp.get("/qr")
def qr():
    return jsonify({"qr_code": _notifications().qr_code()}), 200


@bp.post("/send-reminder/<int:rent_id>")
def send_reminder(rent_id):
    return jsonify(_notifications().send_reminder(rent_id)), 200


@bp.post("/send-bulk-reminders")
def send_bulk_reminders():
    month = (request.get_json(silent=True) or {}).get("month")
    result = _notifications().send_bulk_reminders(month)
    return jsonify({
        "sent": [
            {"tenant_name": i.tenant_name, "phone_number": i.contact_number, "rent_id": i.rent_id}
            for i in result.done
        ],
        "failed": [
            {"tenant_name": i.tenant_name, "phone_number": i.contact_number,
             "rent_id": i.rent_id, "error": i.error}
            for i in result.failed
        ],
        "total": result.total,
    }), 200


@bp.post("/send-payment-confirmation/<int:rent_id>")
def send_payment_confirmation(rent_id):
    return jsonify(_notifications().send_payment_confirmation(rent_id)), 200


@bp.post("/send-custom-message")
def send_custom_message():
    data = request.get_json(silent=True) or {}
    result = _notifications().send_custom_message(parse_int(data.get("tenant_id")), data.get("message"))
    return jsonify(result), 200


@bp.get("/history/<int:tenant_id>")
def history(tenant_id):
    return jsonify(_notifications().history(tenant_id)), 200


@bp.post("/logout")
def logout():
    _notifications().logout()
    return jsonify({"message": "WhatsApp client logged out successfully"}), 200


@bp.post("/webhook")
def webhook():
    """Session events pushed by the WhatsApp gateway"""
    _session().transport.handle_event(request.get_json(silent=True) or {})
    return ("", 204)
