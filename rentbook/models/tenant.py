from datetime import datetime

from ..extensions import db


class Tenant(db.Model):
    __tablename__ = 'tenants'

    id = db.Column(db.Integer, primary_key=True)

    # Personal Information
    name = db.Column(db.String(200), nullable=False, index=True)
    contact_number = db.Column(db.String(10), nullable=False, index=True)
    address = db.Column(db.String(512), nullable=False)
    photo = db.Column(db.String(255), nullable=True)

    # KYC documents
    aadhaar_number = db.Column(db.String(12), nullable=False, unique=True, index=True)
    aadhaar_file = db.Column(db.String(255), nullable=False)
    pan_number = db.Column(db.String(10), nullable=False, unique=True, index=True)
    pan_file = db.Column(db.String(255), nullable=False)

    # Lease terms
    monthly_rent = db.Column(db.Numeric(10, 2), nullable=False)
    deposit = db.Column(db.Numeric(10, 2), nullable=False)
    accommodation_from_date = db.Column(db.Date, nullable=False)
    agreement_done = db.Column(db.Boolean, default=False, nullable=False)
    agreement_date = db.Column(db.Date, nullable=True)

    is_active = db.Column(db.Boolean, default=True, nullable=False, index=True)

    # Metadata
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    rent_records = db.relationship('RentRecord', back_populates='tenant', lazy='dynamic')

    def __repr__(self):
        return f'<Tenant {self.id}: {self.name}>'

    def serialize(self):
        return {
            'id': self.id,
            'name': self.name,
            'contact_number': self.contact_number,
            'address': self.address,
            'photo': self.photo,
            'kyc': {
                'aadhaar_number': self.aadhaar_number,
                'aadhaar_file': self.aadhaar_file,
                'pan_number': self.pan_number,
                'pan_file': self.pan_file,
            },
            'monthly_rent': float(self.monthly_rent),
            'deposit': float(self.deposit),
            'accommodation_from_date': self.accommodation_from_date.isoformat(),
            'agreement': {
                'done': self.agreement_done,
                'date': self.agreement_date.isoformat() if self.agreement_date else None,
            },
            'is_active': self.is_active,
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }

    def summary(self):
        """Short form embedded in rent record listings."""
        return {
            'id': self.id,
            'name': self.name,
            'contact_number': self.contact_number,
        }
