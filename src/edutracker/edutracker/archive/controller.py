from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.web import current_user_id, json_error, roles_required
from ..container import Container
from ..core.constants import CLEAR_ALL_CONFIRMATION
from ..core.enums import Role


def register(app: Flask, container: Container) -> None:
    engine = container.cleanup_engine

    def _admin_name() -> str:
        return session.get("name") or session.get("email") or str(session.get("user_id"))

    @app.route("/api/archive/summary", methods=["GET"], endpoint="archive_summary")
    @roles_required(Role.ADMIN)
    def archive_summary():
        summary = engine.get_cleanup_summary()
        if "error" in summary:
            return json_error("Error loading summary", 500, error=summary["error"])
        return jsonify({"success": True, "data": summary})

    @app.route("/api/archive/mark-complete", methods=["POST"], endpoint="archive_mark_complete")
    @roles_required(Role.ADMIN)
    def archive_mark_complete():
        result = engine.mark_archive_complete(current_user_id(), _admin_name())
        return jsonify(result), (200 if result["success"] else 400)

    @app.route("/api/archive/cleanup", methods=["POST"], endpoint="archive_cleanup")
    @roles_required(Role.ADMIN)
    def archive_cleanup():
        result = engine.execute_monthly_cleanup()
        return jsonify(result.to_dict()), (200 if result.success else 400)

    @app.route("/api/archive/clear-all", methods=["POST"], endpoint="archive_clear_all")
    @roles_required(Role.ADMIN)
    def archive_clear_all():
        body = request.get_json(silent=True) or {}
        if body.get("confirm") != CLEAR_ALL_CONFIRMATION:
            return json_error(
                f'Confirmation text does not match. Please type "{CLEAR_ALL_CONFIRMATION}" to confirm.',
                400,
            )

        result = engine.clear_all_data_keep_accounts(current_user_id(), _admin_name())
        return jsonify(result.to_dict()), (200 if result.success else 500)
