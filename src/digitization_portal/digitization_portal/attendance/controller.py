from __future__ import annotations

from flask import Flask, request

from ..common.http import error_response, ok, request_data
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/clock-in", methods=["POST"], endpoint="attendance_clock_in")
    def attendance_clock_in():
        try:
            record = service.clock_in(request_data().get("actor", ""))
            return ok({"record": record.to_dict()}, message="Clocked in successfully.")
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/clock-out", methods=["POST"], endpoint="attendance_clock_out")
    def attendance_clock_out():
        try:
            record = service.clock_out(request_data().get("actor", ""))
            return ok({"record": record.to_dict()}, message="Clocked out successfully.")
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance/leave", methods=["POST"], endpoint="attendance_leave")
    def attendance_leave():
        try:
            data = request_data()
            record = service.mark_leave(data.get("actor", ""), reason=data.get("reason"))
            return ok({"record": record.to_dict()}, message="Leave recorded.")
        except Exception as e:
            return error_response(e)

    @app.route("/api/attendance", methods=["GET"], endpoint="attendance_list")
    def attendance_list():
        try:
            records = service.list_records(
                month=request.args.get("month") or None,
                user_id=request.args.get("user_id") or None,
            )
            return ok({"records": [r.to_dict() for r in records]})
        except Exception as e:
            return error_response(e)
