"""WhatsApp notifications for rent reminders and payment confirmations."""
import logging
from decimal import Decimal

from ..errors import NotFound, PreconditionFailed, RentbookError, ValidationError
from ..extensions import db
from ..models import STATUS_PAID, STATUS_PENDING, RentRecord
from ..utils.months import month_end, month_label
from ..utils.validation import validate_month
from . import rent_service, tenant_service
from .results import BatchResult, ItemResult

log = logging.getLogger(__name__)

REMINDER_TEMPLATE = """Dear {name},

This is a reminder for your rent payment for {period}.

Details:
• Rent Amount: ₹{rent}
• Light Bill: ₹{light_bill}
• Total Amount: ₹{total}
• Due Date: {due_date}

Please make the payment at your earliest convenience.

Thank you!"""

CONFIRMATION_TEMPLATE = """Dear {name},

Thank you for your rent payment for {period}.

Payment Confirmation:
• Rent Amount: ₹{rent}
• Light Bill: ₹{light_bill}
• Total Amount: ₹{total}
• Payment Date: {payment_date}
• Payment Method: {payment_method}

Your payment has been received and recorded.

Thank you!"""


def format_amount(value) -> str:
    amount = Decimal(str(value))
    if amount == amount.to_integral_value():
        return str(int(amount))
    return f"{amount:.2f}"


def reminder_text(record: RentRecord) -> str:
    return REMINDER_TEMPLATE.format(
        name=record.tenant.name,
        period=month_label(record.month),
        rent=format_amount(record.rent_amount),
        light_bill=format_amount(record.light_bill_amount),
        total=format_amount(record.total_amount),
        due_date=month_end(record.month).strftime("%d/%m/%Y"),
    )


def confirmation_text(record: RentRecord) -> str:
    return CONFIRMATION_TEMPLATE.format(
        name=record.tenant.name,
        period=month_label(record.month),
        rent=format_amount(record.rent_amount),
        light_bill=format_amount(record.light_bill_amount),
        total=format_amount(record.total_amount),
        payment_date=record.payment_date.strftime("%d/%m/%Y") if record.payment_date else "-",
        payment_method=record.payment_method,
    )


class NotificationService:
    """Formats tenant notifications and hands them to a WhatsApp session."""

    def __init__(self, session, country_code: str = "91"):
        self.session = session
        self.country_code = country_code

    def chat_id(self, tenant) -> str:
        return f"{self.country_code}{tenant.contact_number}@c.us"

    def _require_ready(self):
        if not self.session.is_ready:
            raise PreconditionFailed("WhatsApp client is not ready")

    def _sent(self, message, tenant):
        return {"message": message, "sent_to": tenant.name, "phone_number": tenant.contact_number}

    def status(self) -> dict:
        return self.session.status()

    def qr_code(self) -> str:
        if not self.session.has_qr:
            raise NotFound("QR code not available")
        return self.session.qr_code

    def _deliver_reminder(self, record: RentRecord):
        self.session.send_message(self.chat_id(record.tenant), reminder_text(record))
        record.mark_sent()
        db.session.commit()
        log.info("Rent reminder for %s sent to tenant %s", record.month, record.tenant_id)

    def send_reminder(self, rent_id) -> dict:
        self._require_ready()
        record = rent_service.get_rent_record(rent_id)
        self._deliver_reminder(record)
        return self._sent("Rent reminder sent successfully", record.tenant)

    def send_bulk_reminders(self, month: str) -> BatchResult:
        validate_month(month)
        self._require_ready()

        pending = (
            RentRecord.query
            .filter_by(month=month, status=STATUS_PENDING, whatsapp_sent=False)
            .order_by(RentRecord.id)
            .all()
        )
        result = BatchResult()
        for record in pending:
            tenant = record.tenant
            info = {
                "tenant_id": tenant.id,
                "tenant_name": tenant.name,
                "contact_number": tenant.contact_number,
                "rent_id": record.id,
            }
            try:
                self._deliver_reminder(record)
            except Exception as e:
                db.session.rollback()
                message = e.message if isinstance(e, RentbookError) else str(e)
                log.warning("Reminder to tenant %s failed: %s", info["tenant_id"], message)
                result.add(ItemResult.failed(message, **info))
            else:
                result.add(ItemResult.done(record, **info))

        log.info("Bulk reminders for %s: %d sent, %d failed",
                 month, len(result.done), len(result.failed))
        return result

    def send_payment_confirmation(self, rent_id) -> dict:
        self._require_ready()
        record = rent_service.get_rent_record(rent_id)
        if record.status != STATUS_PAID:
            raise PreconditionFailed("Rent is not marked as paid")
        self.session.send_message(self.chat_id(record.tenant), confirmation_text(record))
        log.info("Payment confirmation for %s sent to tenant %s", record.month, record.tenant_id)
        return self._sent("Payment confirmation sent successfully", record.tenant)

    def send_custom_message(self, tenant_id, text) -> dict:
        text = (text or "").strip() if isinstance(text, str) else text
        if not tenant_id or not text:
            raise ValidationError(
                "Tenant ID and message are required",
                {k: "This field is required" for k, v in
                 (("tenant_id", tenant_id), ("message", text)) if not v},
            )
        self._require_ready()
        tenant = tenant_service.get_tenant(tenant_id)
        self.session.send_message(self.chat_id(tenant), text)
        return self._sent("Custom message sent successfully", tenant)

    def history(self, tenant_id) -> list:
        tenant_service.get_tenant(tenant_id)
        records = (
            RentRecord.query
            .filter_by(tenant_id=tenant_id, whatsapp_sent=True)
            .order_by(RentRecord.whatsapp_sent_date.desc())
            .all()
        )
        return [{
            "rent_id": r.id,
            "month": r.month,
            "message_type": "Payment Confirmation" if r.status == STATUS_PAID else "Rent Reminder",
            "sent_date": r.whatsapp_sent_date.isoformat() if r.whatsapp_sent_date else None,
            "rent_amount": float(r.rent_amount),
            "light_bill_amount": float(r.light_bill_amount),
            "total_amount": float(r.total_amount),
        } for r in records]

    def logout(self):
        self.session.logout()
