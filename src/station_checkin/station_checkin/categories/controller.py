from __future__ import annotations

from flask import Flask, jsonify

from ..auth.context import AdminContext
from ..auth.decorators import admin_required
from ..common.http import json_body
from ..container import Container
from .model import Category


def category_payload(category: Category) -> dict:
    return {
        "id": category.category_id,
        "parentId": category.parent_id,
        "code": category.code,
        "name": category.name,
        "active": category.active,
        "sort": category.sort,
    }


def register(app: Flask, container: Container) -> None:
    service = container.category_service

    @app.route("/api/admin/categories", methods=["GET"], endpoint="admin_categories")
    @admin_required
    def admin_categories(admin: AdminContext):
        return jsonify([category_payload(c) for c in service.list_categories(admin)])

    @app.route("/api/admin/categories", methods=["POST"], endpoint="admin_category_create")
    @admin_required
    def admin_category_create(admin: AdminContext):
        body = json_body()
        category = service.create(admin, name=body.get("name"), parent_id=body.get("parentId"), code=body.get("code"))
        return jsonify(category_payload(category)), 201

    @app.route("/api/admin/categories/<int:category_id>", methods=["PATCH", "PUT"], endpoint="admin_category_update")
    @admin_required
    def admin_category_update(admin: AdminContext, category_id: int):
        body = json_body()
        category = service.update(admin, category_id, name=body.get("name"), code=body.get("code"))
        return jsonify(category_payload(category))

    @app.route("/api/admin/categories/<int:category_id>/toggle", methods=["POST"], endpoint="admin_category_toggle")
    @admin_required
    def admin_category_toggle(admin: AdminContext, category_id: int):
        return jsonify(category_payload(service.toggle(admin, category_id)))

    @app.route("/api/admin/categories/<int:category_id>/move", methods=["POST"], endpoint="admin_category_move")
    @admin_required
    def admin_category_move(admin: AdminContext, category_id: int):
        service.move(admin, category_id, json_body().get("direction"))
        return jsonify({"ok": True})
