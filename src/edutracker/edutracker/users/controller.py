from __future__ import annotations

import logging

from flask import Flask, jsonify, request, session

from ..common.web import domain_error_response, json_error, login_required, roles_required
from ..container import Container
from ..core.enums import Role
from ..core.exceptions import DomainError

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = request.get_json(silent=True) or request.form
        try:
            user = container.auth_service.authenticate(body.get("email", ""), body.get("password", ""))
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Login failed unexpectedly")
            return json_error("Server error", 500)

        session.clear()
        session["user_id"] = user.user_id
        session["name"] = user.full_name
        session["email"] = user.email
        session["role"] = user.role.value
        logger.info("User %s logged in as %s", user.user_id, user.role.value)
        return jsonify({"success": True, "data": user.to_dict()})

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @login_required
    def logout():
        session.clear()
        return jsonify({"success": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="me")
    @login_required
    def me():
        return jsonify(
            {
                "success": True,
                "data": {
                    "user_id": session["user_id"],
                    "full_name": session.get("name"),
                    "email": session.get("email"),
                    "role": session.get("role"),
                },
            }
        )

    accounts = container.user_service

    def _body():
        return request.get_json(silent=True) or request.form

    @app.route("/api/users/professor", methods=["POST"], endpoint="users_create_professor")
    @roles_required(Role.ADMIN)
    def users_create_professor():
        body = _body()
        try:
            professor = accounts.create_professor(
                full_name=body.get("full_name", ""),
                email=body.get("email", ""),
                temporary_password=body.get("temporary_password", ""),
                department=body.get("department", ""),
                subject=body.get("subject", ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Create professor failed")
            return json_error("Server error", 500)
        return jsonify({"success": True, "message": "Professor created successfully", "data": professor.to_dict()}), 201

    @app.route("/api/users/professor/<int:user_id>", methods=["PUT"], endpoint="users_update_professor")
    @roles_required(Role.ADMIN)
    def users_update_professor(user_id: int):
        body = _body()
        try:
            professor = accounts.update_professor(
                user_id,
                full_name=body.get("full_name", ""),
                email=body.get("email", ""),
                department=body.get("department", ""),
                subject=body.get("subject", ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Update professor %s failed", user_id)
            return json_error("Error updating professor", 500)
        return jsonify({"success": True, "message": "Professor updated successfully", "data": professor.to_dict()})

    @app.route("/api/users/student", methods=["POST"], endpoint="users_create_student")
    @roles_required(Role.ADMIN)
    def users_create_student():
        body = _body()
        try:
            student = accounts.create_student(
                full_name=body.get("full_name", ""),
                email=body.get("email", ""),
                temporary_password=body.get("temporary_password", ""),
                officer_role=body.get("officer_role", ""),
            )
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Create student failed")
            return json_error("Server error", 500)
        return jsonify({"success": True, "message": "Student created successfully", "data": student.to_dict()}), 201

    @app.route("/api/users/professors", methods=["GET"], endpoint="users_professors")
    @roles_required(Role.ADMIN)
    def users_professors():
        users = accounts.list_by_role(Role.PROFESSOR)
        return jsonify({"success": True, "count": len(users), "data": [u.to_dict() for u in users]})

    @app.route("/api/users/students", methods=["GET"], endpoint="users_students")
    @roles_required(Role.ADMIN)
    def users_students():
        users = accounts.list_by_role(Role.STUDENT)
        return jsonify({"success": True, "count": len(users), "data": [u.to_dict() for u in users]})

    @app.route("/api/users/<int:user_id>", methods=["DELETE"], endpoint="users_delete")
    @roles_required(Role.ADMIN)
    def users_delete(user_id: int):
        try:
            accounts.delete_user(user_id)
        except DomainError as e:
            return domain_error_response(e)
        except Exception:
            logger.exception("Delete user %s failed", user_id)
            return json_error("Server error", 500)
        return jsonify({"success": True, "message": "User deleted successfully"})

    @app.route("/api/public/professors", methods=["GET"], endpoint="public_professors")
    @login_required
    def public_professors():
        return jsonify({"success": True, "data": accounts.professor_directory()})
