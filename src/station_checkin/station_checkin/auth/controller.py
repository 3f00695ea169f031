from __future__ import annotations

import logging

from flask import Flask, jsonify, session

from ..common.http import json_body
from ..container import Container
from ..core.exceptions import UnauthorizedError
from .decorators import ADMIN_SESSION_KEY, current_admin

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    def auth_login():
        body = json_body()
        admin = container.admin_auth_service.authenticate(body.get("username", ""), body.get("password", ""))

        session.clear()
        session[ADMIN_SESSION_KEY] = admin.to_session()
        logger.info("admin %s signed in", admin.email)
        return jsonify({"ok": True, "user": admin.to_session()})

    @app.route("/api/auth/logout", methods=["GET", "POST"], endpoint="auth_logout")
    def auth_logout():
        session.pop(ADMIN_SESSION_KEY, None)
        return jsonify({"ok": True})

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    def auth_me():
        admin = current_admin()
        if not admin:
            raise UnauthorizedError("not_signed_in")
        return jsonify({"user": admin.to_session()})
