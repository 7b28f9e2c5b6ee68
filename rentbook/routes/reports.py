# rentbook/routes/reports.py
from flask import Blueprint, jsonify

from ..services import report_service

bp = Blueprint("reports", __name__)


@bp.get("/reports/yearly/<int:year>")
def yearly(year):
    return jsonify(report_service.yearly_report(year)), 200


@bp.get("/reports/tenants")
def tenants():
    return jsonify(report_service.tenant_stats()), 200


@bp.get("/reports/dashboard")
def dashboard():
    return jsonify(report_service.dashboard()), 200
