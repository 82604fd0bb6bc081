from __future__ import annotations

import logging
from datetime import datetime

from flask import Flask, jsonify, request

from ..common.web import current_role, current_user_id, domain_error_response, json_error, login_required, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def _parse_datetime(value) -> datetime:
    try:
        return datetime.fromisoformat(str(value or "").strip())
    except ValueError:
        raise ValidationError("class_datetime must be an ISO date-time")


def register(app: Flask, container: Container) -> None:
    service = container.assessment_service

    @app.route("/api/assessments", methods=["POST"], endpoint="assessment_submit")
    @roles_required(Role.STUDENT)
    def assessment_submit():
        body = request.get_json(silent=True) or {}
        try:
            ratings = body.get("ratings")
            if not isinstance(ratings, dict):
                raise ValidationError("ratings must be an object of name -> score")
            assessment_id = service.submit(
                current_role=current_role(),
                student_id=current_user_id(),
                professor_id=int(body.get("professor_id") or 0),
                subject=body.get("subject", ""),
                class_datetime=_parse_datetime(body.get("class_datetime")),
                student_role=body.get("student_role", ""),
                ratings=ratings,
                academic_year=body.get("academic_year", ""),
                comments=body.get("comments"),
            )
            return jsonify({"success": True, "assessment_id": assessment_id}), 201
        except (TypeError, ValueError):
            return json_error("professor_id must be an integer", 400)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error submitting assessment")
            return json_error("Server error", 500)

    @app.route("/api/assessments/student", methods=["GET"], endpoint="assessment_student")
    @roles_required(Role.STUDENT)
    def assessment_student():
        try:
            items = service.list_for_student(student_id=current_user_id())
            return jsonify([a.to_dict() for a in items])
        except Exception:
            logger.exception("Error fetching student assessments")
            return json_error("Server error", 500)

    @app.route("/api/assessments/professor", methods=["GET"], endpoint="assessment_professor")
    @login_required
    def assessment_professor():
        try:
            professor_id = int(request.args.get("professor_id") or current_user_id())
            items = service.list_for_professor(
                current_role=current_role(),
                current_user_id=current_user_id(),
                professor_id=professor_id,
            )
            return jsonify([a.to_dict() for a in items])
        except ValueError:
            return json_error("professor_id must be an integer", 400)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Error fetching professor assessments")
            return json_error("Server error", 500)
