from datetime import date
from decimal import Decimal

from rentbook.services import report_service


def test_month_summary_totals(client, make_tenant, make_rent):
    a, b, c = make_tenant(), make_tenant(), make_tenant()
    make_rent(a, status="paid")
    make_rent(b, rent=Decimal("6000"), light_bill=Decimal("250.50"))
    make_rent(c, light_bill=Decimal("0"))
    make_rent(a, month="2024-04")

    body = client.get("/api/rent/summary/2024-03").get_json()
    assert body["month"] == "2024-03"
    assert body["total_records"] == 3
    assert body["total_rent_amount"] == 22000.0
    assert body["total_light_bill_amount"] == 750.5
    assert body["total_amount"] == 22750.5
    assert body["paid_amount"] == 8500.0
    assert body["pending_amount"] == 14250.5
    assert body["overdue_amount"] == 0.0
    assert body["status_breakdown"] == {"pending": 2, "paid": 1, "overdue": 0}


def test_month_summary_empty_and_invalid(client):
    body = client.get("/api/rent/summary/2030-01").get_json()
    assert body["total_records"] == 0
    assert body["total_amount"] == 0.0
    assert client.get("/api/rent/summary/2024-13").status_code == 400


def test_overdue_is_derived_from_pending_past_months(app, make_tenant, make_rent):
    tenant = make_tenant()
    old = make_rent(tenant, month="2024-01")
    make_rent(tenant, month="2024-02", status="paid")
    older = make_rent(make_tenant(), month="2023-12")
    make_rent(tenant, month="2024-03")

    overdue = report_service.overdue_records(today=date(2024, 3, 15))
    assert [r.id for r in overdue] == [older.id, old.id]
    assert all(r.status == "pending" for r in overdue)
    assert old.is_overdue("2024-03")
    assert not old.is_overdue("2024-01")


def test_overdue_list_endpoint(client, make_tenant, make_rent):
    tenant = make_tenant()
    make_rent(tenant, month="2020-01")
    make_rent(tenant, month="2020-02", status="paid")

    body = client.get("/api/rent/overdue/list").get_json()
    assert [r["month"] for r in body] == ["2020-01"]
    assert body[0]["tenant"]["name"] == tenant.name


def test_yearly_report(client, make_tenant, make_rent):
    a, b = make_tenant(), make_tenant()
    make_rent(a, month="2024-01", status="paid")
    make_rent(b, month="2024-01")
    make_rent(a, month="2024-02", status="paid")
    make_rent(a, month="2023-12")

    body = client.get("/api/reports/yearly/2024").get_json()
    assert body["year"] == 2024
    assert len(body["monthly"]) == 12
    jan = body["monthly"][0]
    assert jan["month"] == "2024-01"
    assert jan["month_name"] == "Jan"
    assert jan["record_count"] == 2
    assert jan["total_amount"] == 17000.0
    assert jan["paid_amount"] == 8500.0
    assert jan["pending_amount"] == 8500.0
    assert body["monthly"][11]["record_count"] == 0

    totals = body["totals"]
    assert totals["total_records"] == 3
    assert totals["paid_records"] == 2
    assert totals["pending_records"] == 1
    assert totals["total_rent_collected"] == 17000.0
    assert totals["total_rent_pending"] == 8500.0
    assert totals["total_light_bill_collected"] == 1000.0


def test_tenant_stats(client, make_tenant):
    make_tenant(agreement_done=True, monthly_rent=Decimal("12000"))
    make_tenant()
    make_tenant(is_active=False, deposit=Decimal("5000"))

    body = client.get("/api/reports/tenants").get_json()
    assert body == {
        "total_tenants": 3,
        "active_tenants": 2,
        "inactive_tenants": 1,
        "total_deposit": 45000.0,
        "total_monthly_rent": 22000.0,
        "agreements_done": 1,
        "agreements_pending": 2,
    }


def test_dashboard(app, make_tenant, make_rent):
    a, b = make_tenant(), make_tenant()
    make_tenant(is_active=False)
    make_rent(a, month="2024-03", status="paid")
    make_rent(b, month="2024-03")
    make_rent(b, month="2024-02")

    body = report_service.dashboard(today=date(2024, 3, 10))
    assert body["month"] == "2024-03"
    assert body["total_tenants"] == 3
    assert body["active_tenants"] == 2
    assert body["total_rent"] == 17000.0
    assert body["paid_rent"] == 8500.0
    assert body["pending_rent"] == 8500.0
    assert body["overdue_records"] == 1


def test_dashboard_endpoint(client):
    body = client.get("/api/reports/dashboard").get_json()
    assert body["total_tenants"] == 0
    assert body["total_rent"] == 0.0


def test_yearly_report_rejects_out_of_range_year(client):
    resp = client.get("/api/reports/yearly/0")
    assert resp.status_code == 400
    assert "year" in resp.get_json()["errors"]
    assert client.get("/api/reports/yearly/10000").status_code == 400
