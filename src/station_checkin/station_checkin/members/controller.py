from __future__ import annotations

from flask import Flask, jsonify

from ..auth.context import AdminContext
from ..auth.decorators import admin_required
from ..common.http import json_body
from ..container import Container
from .model import Member
from .service import MemberDetail


def member_payload(member: Member) -> dict:
    return {
        "id": member.member_id,
        "memberNumber": member.member_number,
        "firstName": member.first_name,
        "lastName": member.last_name,
        "mobile": member.mobile,
        "status": member.status.value,
    }


def detail_payload(detail: MemberDetail) -> dict:
    payload = member_payload(detail.member)
    payload["rfidTag"] = detail.rfid_tag
    return payload


def register(app: Flask, container: Container) -> None:
    service = container.member_service

    @app.route("/api/admin/members", methods=["GET"], endpoint="admin_members")
    @admin_required
    def admin_members(admin: AdminContext):
        return jsonify([member_payload(m) for m in service.list_members(admin)])

    @app.route("/api/admin/members", methods=["POST"], endpoint="admin_member_create")
    @admin_required
    def admin_member_create(admin: AdminContext):
        body = json_body()
        member = service.create_member(
            admin,
            member_number=body.get("memberNumber"),
            first_name=body.get("firstName"),
            last_name=body.get("lastName"),
            mobile=body.get("mobile"),
        )
        return jsonify(member_payload(member)), 201

    @app.route("/api/admin/members/<int:member_id>", methods=["GET"], endpoint="admin_member_get")
    @admin_required
    def admin_member_get(admin: AdminContext, member_id: int):
        return jsonify(detail_payload(service.get_member(admin, member_id)))

    @app.route("/api/admin/members/<int:member_id>", methods=["PATCH", "PUT"], endpoint="admin_member_update")
    @admin_required
    def admin_member_update(admin: AdminContext, member_id: int):
        body = json_body()
        detail = service.update_member(
            admin,
            member_id,
            member_number=body.get("memberNumber"),
            first_name=body.get("firstName"),
            last_name=body.get("lastName"),
            mobile=body.get("mobile"),
            status=body.get("status"),
            rfid_tag=body.get("rfidTag"),
        )
        return jsonify(detail_payload(detail))

    @app.route("/api/admin/members/<int:member_id>", methods=["DELETE"], endpoint="admin_member_archive")
    @admin_required
    def admin_member_archive(admin: AdminContext, member_id: int):
        service.archive_member(admin, member_id)
        return jsonify({"ok": True, "status": "archived"})
