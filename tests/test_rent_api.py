from decimal import Decimal

from rentbook.extensions import db
from rentbook.models import RentRecord


def test_create_computes_total_server_side(client, make_tenant):
    tenant = make_tenant()
    resp = client.post("/api/rent", json={
        "tenant_id": tenant.id,
        "month": "2024-03",
        "rent_amount": 8000,
        "light_bill_amount": 500,
        "total_amount": 1,
    })
    assert resp.status_code == 201
    body = resp.get_json()
    assert body["total_amount"] == 8500.0
    assert body["status"] == "pending"
    assert body["payment_method"] == "cash"
    assert body["tenant"]["id"] == tenant.id


def test_light_bill_defaults_to_zero(client, make_tenant):
    tenant = make_tenant()
    body = client.post("/api/rent", json={
        "tenant_id": tenant.id, "month": "2024-03", "rent_amount": "7500.50",
    }).get_json()
    assert body["light_bill_amount"] == 0.0
    assert body["total_amount"] == 7500.5


def test_duplicate_tenant_month_conflicts(client, make_tenant):
    tenant = make_tenant()
    payload = {"tenant_id": tenant.id, "month": "2024-03", "rent_amount": 8000}
    assert client.post("/api/rent", json=payload).status_code == 201
    resp = client.post("/api/rent", json=payload)
    assert resp.status_code == 409
    assert resp.get_json()["error"] == "conflict"
    assert RentRecord.query.count() == 1


def test_create_for_unknown_tenant(client):
    resp = client.post("/api/rent", json={"tenant_id": 42, "month": "2024-03", "rent_amount": 1})
    assert resp.status_code == 404


def test_create_validates_payload(client):
    resp = client.post("/api/rent", json={
        "tenant_id": "x", "month": "03-2024", "rent_amount": -1,
        "light_bill_amount": "abc", "payment_method": "card",
    })
    assert resp.status_code == 400
    assert set(resp.get_json()["errors"]) == {
        "tenant_id", "month", "rent_amount", "light_bill_amount", "payment_method",
    }


def test_update_recomputes_total(client, make_tenant, make_rent):
    record = make_rent(make_tenant())
    resp = client.put(f"/api/rent/{record.id}", json={
        "light_bill_amount": 750, "total_amount": 99, "notes": "meter read on 2nd",
    })
    assert resp.status_code == 200
    body = resp.get_json()
    assert body["rent_amount"] == 8000.0
    assert body["light_bill_amount"] == 750.0
    assert body["total_amount"] == 8750.0
    assert body["notes"] == "meter read on 2nd"


def test_total_invariant_holds_for_direct_writes(app, make_tenant, make_rent):
    record = make_rent(make_tenant())
    record.light_bill_amount = Decimal("1200")
    db.session.commit()
    db.session.expire_all()
    stored = db.session.get(RentRecord, record.id)
    assert stored.total_amount == stored.rent_amount + stored.light_bill_amount == Decimal("9200")


def test_get_includes_tenant(client, make_tenant, make_rent):
    tenant = make_tenant()
    record = make_rent(tenant)
    body = client.get(f"/api/rent/{record.id}").get_json()
    assert body["tenant"]["kyc"]["pan_number"] == tenant.pan_number
    assert client.get("/api/rent/999").status_code == 404


def test_mark_paid(client, make_tenant, make_rent):
    record = make_rent(make_tenant())
    body = client.patch(f"/api/rent/{record.id}/mark-paid", json={"payment_method": "upi"}).get_json()
    assert body["status"] == "paid"
    assert body["payment_method"] == "upi"
    assert body["payment_date"] is not None

    again = client.patch(f"/api/rent/{record.id}/mark-paid").get_json()
    assert again["status"] == "paid"
    assert again["payment_method"] == "upi"
    assert again["payment_date"] is not None


def test_mark_paid_rejects_unknown_method(client, make_tenant, make_rent):
    record = make_rent(make_tenant())
    resp = client.patch(f"/api/rent/{record.id}/mark-paid", json={"payment_method": "card"})
    assert resp.status_code == 400
    assert db.session.get(RentRecord, record.id).status == "pending"


def test_delete_is_hard(client, make_tenant, make_rent):
    record = make_rent(make_tenant())
    assert client.delete(f"/api/rent/{record.id}").status_code == 200
    assert client.get(f"/api/rent/{record.id}").status_code == 404
    assert client.delete(f"/api/rent/{record.id}").status_code == 404


def test_list_filters(client, make_tenant, make_rent):
    a, b = make_tenant(), make_tenant()
    make_rent(a, month="2024-02", status="paid")
    make_rent(a, month="2024-03")
    make_rent(b, month="2024-03")

    body = client.get("/api/rent?month=2024-03").get_json()
    assert body["total"] == 2
    assert all(r["month"] == "2024-03" for r in body["rent_records"])
    assert "name" in body["rent_records"][0]["tenant"]

    body = client.get("/api/rent?status=paid").get_json()
    assert [r["month"] for r in body["rent_records"]] == ["2024-02"]

    body = client.get(f"/api/rent?tenant={a.id}").get_json()
    assert [r["month"] for r in body["rent_records"]] == ["2024-03", "2024-02"]

    body = client.get("/api/rent?status=all&limit=1").get_json()
    assert body["total"] == 3 and body["total_pages"] == 3

    assert client.get("/api/rent?month=March").status_code == 400
    assert client.get("/api/rent?status=late").status_code == 400
