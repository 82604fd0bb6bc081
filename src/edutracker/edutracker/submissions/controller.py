from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, domain_error_response, json_error, login_required, optional_date
from ..container import Container
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    service = container.submission_service

    @app.route("/api/student-attendance/upload", methods=["POST"], endpoint="submission_upload")
    @login_required
    def submission_upload():
        body = request.get_json(silent=True) or {}
        try:
            class_date = optional_date(body.get("date"), "date")
            if class_date is None:
                raise ValidationError("date is required")
            raw_professor = body.get("professor_id")
            submission = service.upload(
                current_role=current_role(),
                student_id=current_user_id(),
                professor_id=int(raw_professor) if raw_professor not in (None, "") else None,
                subject=body.get("subject", ""),
                section=body.get("section", ""),
                class_date=class_date,
                google_docs_url=body.get("google_docs_url", ""),
            )
            return (
                jsonify({"success": True, "message": "Attendance link uploaded successfully", "data": submission.to_dict()}),
                201,
            )
        except ValueError:
            return json_error("professor_id must be an integer", 400)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Upload attendance error")
            return json_error("Server error", 500)

    @app.route("/api/student-attendance/my-submissions", methods=["GET"], endpoint="submission_mine")
    @login_required
    def submission_mine():
        try:
            items = service.list_mine(current_role=current_role(), student_id=current_user_id())
            return jsonify([s.to_dict() for s in items])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Get submissions error")
            return json_error("Server error", 500)

    @app.route("/api/student-attendance/all", methods=["GET"], endpoint="submission_all")
    @login_required
    def submission_all():
        try:
            items = service.list_all(
                current_role=current_role(),
                section=request.args.get("section", ""),
                subject=request.args.get("subject", ""),
                start_date=optional_date(request.args.get("start_date"), "start_date"),
                end_date=optional_date(request.args.get("end_date"), "end_date"),
            )
            return jsonify([s.to_dict() for s in items])
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Get all submissions error")
            return json_error("Server error", 500)
