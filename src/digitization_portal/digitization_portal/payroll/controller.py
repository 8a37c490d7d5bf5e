from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, ok
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.salary_report_service

    @app.route("/api/salaries", methods=["GET"], endpoint="salary_sheet")
    def salary_sheet():
        try:
            rows = service.salary_sheet(
                month=request.args.get("month") or None,
                search=request.args.get("search"),
            )
            return ok({"salaries": [r.to_dict() for r in rows]})
        except Exception as e:
            return error_response(e)

    @app.route("/api/salaries/months", methods=["GET"], endpoint="salary_months")
    def salary_months():
        try:
            return ok({"months": service.available_months()})
        except Exception as e:
            return error_response(e)
