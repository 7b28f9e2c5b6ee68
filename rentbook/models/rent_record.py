from datetime import datetime
from decimal import Decimal

from ..extensions import db

STATUS_PENDING = 'pending'
STATUS_PAID = 'paid'
STATUS_OVERDUE = 'overdue'
STATUSES = (STATUS_PENDING, STATUS_PAID, STATUS_OVERDUE)

PAYMENT_METHODS = ('cash', 'bank_transfer', 'upi', 'cheque')


def _money(value):
    return Decimal(str(value if value is not None else 0))


class RentRecord(db.Model):
    __tablename__ = 'rent_records'
    __table_args__ = (
        db.UniqueConstraint('tenant_id', 'month', name='uq_rent_records_tenant_month'),
    )

    id = db.Column(db.Integer, primary_key=True)
    tenant_id = db.Column(db.Integer, db.ForeignKey('tenants.id'), nullable=False, index=True)
    month = db.Column(db.String(7), nullable=False, index=True)  # YYYY-MM

    # Financial details
    rent_amount = db.Column(db.Numeric(10, 2), nullable=False)
    light_bill_amount = db.Column(db.Numeric(10, 2), nullable=False, default=0)
    total_amount = db.Column(db.Numeric(10, 2), nullable=False)

    # Payment tracking
    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING, index=True)
    payment_method = db.Column(db.String(20), nullable=False, default='cash')
    payment_date = db.Column(db.DateTime, nullable=True, index=True)
    notes = db.Column(db.Text, nullable=True)

    # WhatsApp notification tracking
    whatsapp_sent = db.Column(db.Boolean, nullable=False, default=False)
    whatsapp_sent_date = db.Column(db.DateTime, nullable=True)

    # Metadata
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    tenant = db.relationship('Tenant', back_populates='rent_records')

    def __repr__(self):
        return f'<RentRecord {self.id}: Tenant {self.tenant_id}, {self.month}, {self.status}>'

    def calculate_total_amount(self):
        """Total is always rent plus light bill."""
        self.light_bill_amount = _money(self.light_bill_amount)
        self.rent_amount = _money(self.rent_amount)
        self.total_amount = self.rent_amount + self.light_bill_amount
        return self.total_amount

    def mark_paid(self, payment_method=None, payment_date=None):
        self.status = STATUS_PAID
        self.payment_date = payment_date or datetime.utcnow()
        if payment_method:
            self.payment_method = payment_method

    def mark_sent(self, sent_at=None):
        self.whatsapp_sent = True
        self.whatsapp_sent_date = sent_at or datetime.utcnow()

    def is_overdue(self, current_month):
        """Pending and billed for a month before `current_month` (YYYY-MM)."""
        return self.status == STATUS_PENDING and self.month < current_month

    def serialize(self, with_tenant='summary'):
        data = {
            'id': self.id,
            'tenant_id': self.tenant_id,
            'month': self.month,
            'rent_amount': float(self.rent_amount),
            'light_bill_amount': float(self.light_bill_amount),
            'total_amount': float(self.total_amount),
            'status': self.status,
            'payment_method': self.payment_method,
            'payment_date': self.payment_date.isoformat() if self.payment_date else None,
            'notes': self.notes,
            'whatsapp_sent': self.whatsapp_sent,
            'whatsapp_sent_date': self.whatsapp_sent_date.isoformat() if self.whatsapp_sent_date else None,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
        if with_tenant == 'full' and self.tenant is not None:
            data['tenant'] = self.tenant.serialize()
        elif with_tenant == 'summary' and self.tenant is not None:
            data['tenant'] = self.tenant.summary()
        return data
