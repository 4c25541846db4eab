from __future__ import annotations

from flask import Flask, jsonify, request, session

from ..common.http import current_user_id, get_request_data, json_endpoint, login_required
from ..common.serializers import user_to_json
from ..container import Container
from ..core.exceptions import AuthenticationError
from ..core.logging_config import get_client_ip, security_logger


def register(app: Flask, container: Container) -> None:
    api = json_endpoint(app)

    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @api
    def login():
        data = get_request_data()
        username = str(data.get("username") or "")
        password = str(data.get("password") or "")

        try:
            user = container.auth_service.authenticate(username, password)
        except AuthenticationError:
            security_logger.log_login(username, get_client_ip(request), success=False)
            raise

        session.clear()
        session.permanent = True
        session["user_id"] = user.id
        security_logger.log_login(username, get_client_ip(request), success=True)
        return jsonify(user_to_json(user)), 200

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @api
    def logout():
        user_id = session.get("user_id")
        session.clear()
        if user_id is not None:
            security_logger.log_logout(user_id, get_client_ip(request))
        return jsonify({"message": "Logged out successfully"}), 200

    @app.route("/api/auth/user", methods=["GET"], endpoint="current_user")
    @login_required
    @api
    def current_user():
        user = container.auth_service.current_user(current_user_id())
        return jsonify(user_to_json(user)), 200

    @app.route("/api/user/language", methods=["PATCH"], endpoint="update_language")
    @login_required
    @api
    def update_language():
        data = get_request_data()
        user = container.user_service.update_language(current_user_id(), data.get("language"))
        return jsonify(user_to_json(user)), 200

    @app.route("/api/user/profile", methods=["PATCH"], endpoint="update_profile")
    @login_required
    @api
    def update_profile():
        data = get_request_data()
        user = container.user_service.update_profile(
            current_user_id(),
            name=data.get("name"),
            department=data.get("department"),
        )
        return jsonify(user_to_json(user)), 200

    @app.route("/api/user/password", methods=["PATCH"], endpoint="change_password")
    @login_required
    @api
    def change_password():
        data = get_request_data()
        container.user_service.change_password(
            current_user_id(),
            current_password=data.get("currentPassword", data.get("current_password")),
            new_password=data.get("newPassword", data.get("new_password")),
            confirm_password=data.get("confirmPassword", data.get("confirm_password")),
        )
        return jsonify({"message": "Password updated"}), 200
