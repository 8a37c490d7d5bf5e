from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.report_service

    @app.route("/api/reports", methods=["POST"], endpoint="reports_submit")
    def reports_submit():
        try:
            data = request_data()
            report = service.submit(
                data.get("actor", ""),
                stage=data.get("stage"),
                report_type=data.get("type"),
                quantity=data.get("quantity"),
                work_date=data.get("date"),
            )
            return ok({"report": report.to_dict()}, message="Work logged successfully.", status=201)
        except Exception as e:
            return error_response(e)

    @app.route("/api/reports/mine", methods=["GET"], endpoint="reports_mine")
    def reports_mine():
        try:
            reports = service.list_mine(request.args.get("actor", ""))
            return ok({"reports": [r.to_dict() for r in reports]})
        except Exception as e:
            return error_response(e)

    @app.route("/api/reports", methods=["GET"], endpoint="reports_list")
    def reports_list():
        try:
            groups = service.reports_by_employee(
                month=request.args.get("month") or None,
                search=request.args.get("search"),
            )
            return ok({"employees": [g.to_dict() for g in groups]})
        except Exception as e:
            return error_response(e)

    @app.route("/api/reports/<int:report_id>", methods=["DELETE"], endpoint="reports_delete")
    def reports_delete(report_id: int):
        try:
            actor = request_data().get("actor") or request.args.get("actor", "")
            service.delete(report_id=report_id, employee_id=actor)
            return ok(message="Report removed.")
        except Exception as e:
            return error_response(e)
