from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from ..common.web import current_user_id, domain_error_response, json_error, optional_date, roles_required
from ..container import Container
from ..core.constants import DEFAULT_HISTORY_PAGE_SIZE
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError
from .service import UploadedImage

logger = logging.getLogger(__name__)


def _uploaded_image():
    f = request.files.get("image")
    if f is None or not f.filename:
        return None
    return UploadedImage(data=f.read(), filename=f.filename)


def _int_arg(name: str, default: int) -> int:
    raw = request.args.get(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"{name} must be an integer")


def register(app: Flask, container: Container) -> None:
    service = container.attendance_service

    @app.route("/api/attendance/start", methods=["POST"], endpoint="attendance_start")
    @roles_required(Role.PROFESSOR)
    def attendance_start():
        try:
            session_ = service.start_session(
                professor_id=current_user_id(),
                subject=request.form.get("subject", ""),
                section=request.form.get("section", ""),
                class_room=request.form.get("class_room", ""),
                notes=request.form.get("notes", ""),
                image=_uploaded_image(),
            )
            return (
                jsonify({"success": True, "message": "Attendance session started successfully", "data": session_.to_dict()}),
                201,
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error starting attendance session")
            return json_error("Error starting attendance session", 500)

    @app.route("/api/attendance/end/<int:session_id>", methods=["POST"], endpoint="attendance_end")
    @roles_required(Role.PROFESSOR)
    def attendance_end(session_id: int):
        try:
            session_ = service.end_session(
                professor_id=current_user_id(),
                session_id=session_id,
                image=_uploaded_image(),
            )
            return jsonify({"success": True, "message": "Attendance session ended successfully", "data": session_.to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error ending attendance session %s", session_id)
            return json_error("Error ending attendance session", 500)

    @app.route("/api/attendance/today", methods=["GET"], endpoint="attendance_today")
    @roles_required(Role.PROFESSOR)
    def attendance_today():
        try:
            sessions = service.list_today(professor_id=current_user_id())
            return jsonify({"success": True, "count": len(sessions), "data": [s.to_dict() for s in sessions]})
        except Exception:
            logger.exception("Error fetching today's attendance")
            return json_error("Error fetching attendance data", 500)

    @app.route("/api/attendance/history", methods=["GET"], endpoint="attendance_history")
    @roles_required(Role.PROFESSOR)
    def attendance_history():
        try:
            page = service.history(
                professor_id=current_user_id(),
                start_date=optional_date(request.args.get("start_date"), "start_date"),
                end_date=optional_date(request.args.get("end_date"), "end_date"),
                subject=request.args.get("subject", ""),
                section=request.args.get("section", ""),
                status=request.args.get("status", ""),
                page=_int_arg("page", 1),
                limit=_int_arg("limit", DEFAULT_HISTORY_PAGE_SIZE),
            )
            return jsonify({"success": True, **page.to_dict()})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error fetching attendance history")
            return json_error("Error fetching attendance history", 500)

    @app.route("/api/attendance/stats", methods=["GET"], endpoint="attendance_stats")
    @roles_required(Role.PROFESSOR)
    def attendance_stats():
        try:
            return jsonify({"success": True, "data": service.stats(professor_id=current_user_id())})
        except Exception:
            logger.exception("Error fetching attendance stats")
            return json_error("Error fetching statistics", 500)

    @app.route("/api/attendance/<int:session_id>", methods=["DELETE"], endpoint="attendance_delete")
    @roles_required(Role.PROFESSOR)
    def attendance_delete(session_id: int):
        try:
            outcome = service.delete_session(professor_id=current_user_id(), session_id=session_id)
            return jsonify({"success": True, "message": "Attendance session deleted successfully", "data": outcome})
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error deleting attendance session %s", session_id)
            return json_error("Error deleting attendance session", 500)
