from __future__ import annotations

from flask import Flask, jsonify, request

from ..auth.context import AdminContext
from ..auth.decorators import admin_required
from ..common.datetime_utils import to_iso
from ..common.http import json_body
from ..container import Container
from ..core.constants import KIOSK_KEY_COOKIE

KIOSK_COOKIE_MAX_AGE = 60 * 60 * 24 * 365 * 5


def register(app: Flask, container: Container) -> None:
    service = container.device_service

    @app.route("/api/kiosk/register", methods=["POST"], endpoint="kiosk_register")
    def kiosk_register():
        body = json_body()
        registered = service.register(body.get("passphrase"), name=body.get("name"))

        resp = jsonify(
            {
                "ok": True,
                "deviceId": registered.device_id,
                "stationId": registered.station_id,
                "name": registered.name,
                "kioskKey": registered.kiosk_key,
            }
        )
        resp.set_cookie(
            KIOSK_KEY_COOKIE,
            registered.kiosk_key,
            max_age=KIOSK_COOKIE_MAX_AGE,
            httponly=True,
            samesite="Lax",
            secure=bool(app.config.get("SESSION_COOKIE_SECURE")),
        )
        return resp

    @app.route("/api/kiosk/reset", methods=["GET", "POST"], endpoint="kiosk_reset")
    def kiosk_reset():
        resp = jsonify({"ok": True})
        resp.delete_cookie(KIOSK_KEY_COOKIE, httponly=True, samesite="Lax")
        return resp

    @app.route("/api/admin/kiosks", methods=["GET"], endpoint="admin_kiosks")
    @admin_required
    def admin_kiosks(admin: AdminContext):
        overview = service.overview(admin)
        return jsonify(
            {
                "stations": [
                    {"id": s.station_id, "name": s.name, "code": s.code, "active": s.active}
                    for s in overview.stations
                ],
                "devices": [
                    {
                        "id": d.device_id,
                        "stationId": d.station_id,
                        "name": d.name,
                        "active": d.active,
                        "lastSeenAt": to_iso(d.last_seen_at),
                    }
                    for d in overview.devices
                ],
                "invites": [
                    {
                        "id": i.invite_id,
                        "stationId": i.station_id,
                        "passphrase": i.phrase_display,
                        "expiresAt": to_iso(i.expires_at),
                    }
                    for i in overview.invites
                ],
            }
        )

    @app.route("/api/admin/kiosks/invite", methods=["POST"], endpoint="admin_kiosk_invite")
    @admin_required
    def admin_kiosk_invite(admin: AdminContext):
        body = json_body()
        issued = service.create_invite(admin, station_id=body.get("stationId"), expires_days=body.get("expiresDays"))
        return (
            jsonify(
                {
                    "id": issued.invite_id,
                    "stationId": issued.station_id,
                    "passphrase": issued.passphrase,
                    "expiresAt": to_iso(issued.expires_at),
                }
            ),
            201,
        )

    @app.route("/api/admin/kiosks/<int:device_id>", methods=["PATCH", "DELETE"], endpoint="admin_kiosk_device")
    @admin_required
    def admin_kiosk_device(admin: AdminContext, device_id: int):
        if request.method == "DELETE":
            service.deactivate(admin, device_id)
        else:
            service.rename(admin, device_id, json_body().get("name"))
        return jsonify({"ok": True})
