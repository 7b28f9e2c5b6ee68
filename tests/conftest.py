"""
Pytest fixtures for the rentbook test suite.

Provides:
- an application on in-memory SQLite with a temp upload folder
- a recording WhatsApp transport (no network)
- tenant / rent record factories
"""
import io
import itertools
from datetime import date
from decimal import Decimal

import pytest

from rentbook import create_app
from rentbook.config import TestingConfig
from rentbook.errors import ExternalServiceError
from rentbook.extensions import db
from rentbook.models import RentRecord, Tenant
from rentbook.whatsapp import ConsoleTransport


class RecordingTransport(ConsoleTransport):
    """Console transport that can be told to fail for given chat ids."""

    def __init__(self):
        super().__init__()
        self.fail_for = set()
        self.destroyed = False

    def send_message(self, chat_id, text):
        if chat_id in self.fail_for:
            raise ExternalServiceError("delivery failed")
        return super().send_message(chat_id, text)

    def destroy(self):
        self.destroyed = True


@pytest.fixture
def transport():
    return RecordingTransport()


@pytest.fixture
def app(tmp_path, transport):
    class Config(TestingConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    app = create_app(Config, transport=transport)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def wa_session(app):
    return app.extensions["whatsapp"]


@pytest.fixture
def ready_session(wa_session):
    # console transport reports ready as soon as it starts
    wa_session.start()
    assert wa_session.is_ready
    return wa_session


@pytest.fixture
def make_tenant(app):
    counter = itertools.count(1)

    def _make(**overrides):
        n = next(counter)
        fields = dict(
            name=f"Tenant {n}",
            contact_number=f"98765432{n:02d}",
            address="12 MG Road, Pune",
            aadhaar_number=f"{n:012d}",
            pan_number=f"ABCDE{n:04d}F",
            aadhaar_file="aadhaar.pdf",
            pan_file="pan.pdf",
            monthly_rent=Decimal("10000"),
            deposit=Decimal("20000"),
            accommodation_from_date=date(2024, 1, 1),
            is_active=True,
        )
        fields.update(overrides)
        tenant = Tenant(**fields)
        db.session.add(tenant)
        db.session.commit()
        return tenant

    return _make


@pytest.fixture
def make_rent(app):
    def _make(tenant, month="2024-03", rent=Decimal("8000"), light_bill=Decimal("500"), **overrides):
        record = RentRecord(
            tenant_id=tenant.id,
            month=month,
            rent_amount=rent,
            light_bill_amount=light_bill,
            **overrides,
        )
        db.session.add(record)
        db.session.commit()
        return record

    return _make


def _tenant_form(**overrides):
    """Multipart form for POST/PUT /api/tenants, with fresh file streams."""
    form = {
        "name": "Ravi Kumar",
        "contact_number": "9876543210",
        "address": "12 MG Road, Pune",
        "aadhaar_number": "123412341234",
        "pan_number": "ABCDE1234F",
        "monthly_rent": "10000",
        "deposit": "20000",
        "accommodation_from_date": "2024-01-01",
        "agreement_done": "true",
        "agreement_date": "2024-01-05",
        "aadhaar_file": (io.BytesIO(b"%PDF-1.4 aadhaar"), "aadhaar.pdf"),
        "pan_file": (io.BytesIO(b"%PDF-1.4 pan"), "pan.pdf"),
    }
    form.update(overrides)
    return {k: v for k, v in form.items() if v is not None}


@pytest.fixture
def tenant_form():
    return _tenant_form
