from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.context import KioskContext
from ..auth.decorators import kiosk_required
from ..common.datetime_utils import to_iso
from ..common.http import json_body
from ..container import Container
from ..core.enums import ScanStatus
from ..sessions.model import SessionView
from .model import ScanResult


def scan_payload(result: ScanResult):
    """Map a scan outcome onto the kiosk's JSON contract."""
    if result.status == ScanStatus.DISABLED:
        return jsonify({"error": "disabled"}), 403
    if result.status == ScanStatus.UNKNOWN:
        return jsonify({"status": ScanStatus.UNKNOWN.value})
    if result.status == ScanStatus.AMBIGUOUS:
        return jsonify(
            {
                "status": ScanStatus.AMBIGUOUS.value,
                "candidates": [
                    {
                        "id": c.member_id,
                        "firstName": c.first_name,
                        "lastName": c.last_name,
                        "memberNumber": c.member_number,
                    }
                    for c in result.candidates
                ],
            }
        )

    payload = {
        "status": result.status.value,
        "sessionId": result.session_id,
        "startTime": to_iso(result.start_time),
    }
    if result.member:
        payload["firstName"] = result.member.first_name
    if result.matched_by:
        payload["matchedBy"] = result.matched_by.value
    return jsonify(payload)


def session_payload(view: SessionView) -> dict:
    return {
        "sessionId": view.session_id,
        "memberId": view.member_id,
        "firstName": view.first_name,
        "lastName": view.last_name,
        "isVisitor": view.is_visitor,
        "status": view.status.value,
        "startTime": to_iso(view.start_time),
        "endTime": to_iso(view.end_time),
        "visitorAgency": view.visitor_agency,
        "visitorPurpose": view.visitor_purpose,
    }


def register(app: Flask, container: Container) -> None:
    kiosk_auth = kiosk_required(container.device_service)
    service = container.kiosk_service

    @app.route("/api/kiosk/scan", methods=["POST"], endpoint="kiosk_scan")
    @kiosk_auth
    def kiosk_scan(kiosk: KioskContext):
        body = json_body()
        # Older kiosk builds post the identifier as "mobile" or "token".
        identifier = body.get("identifier") or body.get("mobile") or body.get("token")
        return scan_payload(service.scan(kiosk, identifier))

    @app.route("/api/kiosk/scan-as", methods=["POST"], endpoint="kiosk_scan_as")
    @kiosk_auth
    def kiosk_scan_as(kiosk: KioskContext):
        return scan_payload(service.scan_as(kiosk, json_body().get("memberId")))

    @app.route("/api/kiosk/checkout", methods=["POST"], endpoint="kiosk_checkout")
    @kiosk_auth
    def kiosk_checkout(kiosk: KioskContext):
        body = json_body()
        result = service.check_out(
            kiosk,
            session_id=body.get("sessionId"),
            end_time=body.get("endTime"),
            tasks=body.get("tasks"),
            minutes=body.get("minutes"),
        )
        return jsonify({"status": "checked_out", "sessionId": result.session_id, "minutes": result.duration_minutes})

    @app.route("/api/kiosk/active", methods=["GET"], endpoint="kiosk_active")
    @kiosk_auth
    def kiosk_active(kiosk: KioskContext):
        return jsonify([session_payload(v) for v in service.active_sessions(kiosk)])

    @app.route("/api/kiosk/session", methods=["GET"], endpoint="kiosk_session")
    @kiosk_auth
    def kiosk_session(kiosk: KioskContext):
        return jsonify(session_payload(service.session_detail(kiosk, request.args.get("sessionId"))))

    @app.route("/api/kiosk/categories", methods=["GET"], endpoint="kiosk_categories")
    @kiosk_auth
    def kiosk_categories(kiosk: KioskContext):
        return jsonify(container.category_service.kiosk_tree(kiosk))

    @app.route("/api/kiosk/visitor/checkin", methods=["POST"], endpoint="kiosk_visitor_checkin")
    @kiosk_auth
    def kiosk_visitor_checkin(kiosk: KioskContext):
        body = json_body()
        result = service.visitor_check_in(
            kiosk,
            first_name=body.get("firstName"),
            last_name=body.get("lastName"),
            mobile=body.get("mobile"),
            agency=body.get("agency"),
            purpose=body.get("purpose"),
        )
        return jsonify({"status": result.status.value, "sessionId": result.session_id, "startTime": to_iso(result.start_time)})

    @app.route("/api/kiosk/visitor/checkout", methods=["POST"], endpoint="kiosk_visitor_checkout")
    @kiosk_auth
    def kiosk_visitor_checkout(kiosk: KioskContext):
        body = json_body()
        result = service.visitor_check_out(
            kiosk,
            session_id=body.get("sessionId"),
            end_time=body.get("endTime"),
            purpose=body.get("purpose"),
            agency=body.get("agency"),
        )
        return jsonify({"status": "checked_out", "sessionId": result.session_id, "minutes": result.duration_minutes})
