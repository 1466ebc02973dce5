from datetime import datetime
from flask import Blueprint, request, jsonify, send_file, current_app
from reports.report_service import ReportService
from user.jwt_middleware import jwt_required, get_current_owner_id

bp = Blueprint("reports", __name__)


def _range_args():
    return (
        request.args.get("range", "all"),
        request.args.get("start"),
        request.args.get("end"),
    )


def _inventory_args():
    return (
        request.args.get("sort", "name"),
        request.args.get("filter", "all"),
        current_app.config.get("LOW_STOCK_THRESHOLD", 5),
    )


@bp.route("/sales", methods=["GET"])
@jwt_required
def get_sales_report():
    report_data = ReportService.generate_sales_report(get_current_owner_id(), *_range_args())
    return jsonify(report_data), 200


@bp.route("/profit", methods=["GET"])
@jwt_required
def get_profit_report():
    report_data = ReportService.generate_profit_report(get_current_owner_id(), *_range_args())
    return jsonify(report_data), 200


@bp.route("/restock", methods=["GET"])
@jwt_required
def get_restock_report():
    report_data = ReportService.generate_restock_report(get_current_owner_id(), *_range_args())
    return jsonify(report_data), 200


@bp.route("/inventory", methods=["GET"])
@jwt_required
def get_inventory_report():
    report_data = ReportService.generate_inventory_report(get_current_owner_id(), *_inventory_args())
    return jsonify(report_data), 200


@bp.route("/inventory/export", methods=["GET"])
@jwt_required
def export_inventory_excel():
    output = ReportService.export_inventory_excel(get_current_owner_id(), *_inventory_args())
    filename = f"inventory_report_{datetime.now().strftime('%Y%m%d_%H%M%S')}.xlsx"
    return send_file(
        output,
        mimetype='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        as_attachment=True,
        download_name=filename
    )


@bp.route("/", methods=["GET"])
@jwt_required
def list_reports():
    return jsonify([
        {"name": "Sales Report", "endpoint": "/reports/sales"},
        {"name": "Profit Report", "endpoint": "/reports/profit"},
        {"name": "Inventory Report", "endpoint": "/reports/inventory"},
        {"name": "Restock Report", "endpoint": "/reports/restock"},
    ]), 200
