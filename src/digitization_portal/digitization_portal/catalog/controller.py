from __future__ import annotations

from dataclasses import asdict

from flask import Flask, request

from ..common.http import error_response, ok, request_data
from ..core.exceptions import ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    service = container.catalog_service

    @app.route("/api/catalog/parse", methods=["POST"], endpoint="catalog_parse")
    def catalog_parse():
        """Auto-detect preview for a single file name."""
        try:
            data = request_data()
            parsed = service.preview(data.get("file_name", ""))
            body = asdict(parsed)
            body["stage"] = parsed.stage.value if parsed.stage else None
            return ok({"parsed": body})
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog/translate", methods=["POST"], endpoint="catalog_translate")
    def catalog_translate():
        try:
            data = request_data()
            fields = service.parse_and_translate(data.get("file_name", ""))
            return ok({"fields": asdict(fields)})
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog", methods=["GET"], endpoint="catalog_list")
    def catalog_list():
        try:
            records = service.list_records(search=request.args.get("search"))
            return ok({"records": [r.to_dict() for r in records]})
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog", methods=["POST"], endpoint="catalog_add")
    def catalog_add():
        try:
            data = request_data()
            record = service.add_record(
                file_name=data.get("file_name", ""),
                actor=data.get("actor"),
                book_name=data.get("book_name"),
                author_name=data.get("author_name"),
                year=data.get("year"),
                stage=data.get("stage"),
            )
            return ok({"record": record.to_dict()}, message="Record added successfully.", status=201)
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog/<int:record_id>", methods=["PATCH"], endpoint="catalog_update")
    def catalog_update(record_id: int):
        try:
            data = request_data()
            record = service.update_record(
                record_id=record_id,
                actor=data.get("actor"),
                stage=data.get("stage"),
                assignee=data.get("assignee"),
                scanned_by=data.get("scanned_by"),
                digitized_by=data.get("digitized_by"),
                deadline=data.get("deadline"),
            )
            return ok({"record": record.to_dict()}, message="Record updated.")
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog/<int:record_id>/complete", methods=["POST"], endpoint="catalog_complete")
    def catalog_complete(record_id: int):
        try:
            data = request_data()
            record = service.mark_completed(record_id=record_id, actor=data.get("actor"))
            return ok({"record": record.to_dict()}, message="Task marked as completed.")
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog/tasks", methods=["GET"], endpoint="catalog_tasks")
    def catalog_tasks():
        try:
            groups = service.tasks_by_assignee(
                assignee=request.args.get("assignee"),
                search=request.args.get("search"),
            )
            return ok(
                {
                    "assignees": [
                        {"assignee": g.assignee, "tasks": [t.to_dict() for t in g.tasks]}
                        for g in groups
                    ]
                }
            )
        except Exception as e:
            return error_response(e)

    @app.route("/api/catalog/import", methods=["POST"], endpoint="catalog_import")
    def catalog_import():
        try:
            upload = request.files.get("file")
            if upload is None or not upload.filename:
                raise ValidationError("Please select a file to import")
            result = service.import_file(upload.stream, upload.filename, actor=request.form.get("actor"))
            return ok(result.to_dict(), message=result.message)
        except Exception as e:
            return error_response(e)
