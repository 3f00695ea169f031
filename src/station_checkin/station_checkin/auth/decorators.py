from __future__ import annotations

from functools import wraps
from typing import Callable

from flask import request, session

from ..core.constants import KIOSK_KEY_COOKIE, KIOSK_KEY_HEADER
from ..core.exceptions import UnauthorizedError
from ..devices.service import DeviceService
from .context import AdminContext

ADMIN_SESSION_KEY = "admin"


def kiosk_key_from_request() -> str:
    return (request.headers.get(KIOSK_KEY_HEADER) or request.cookies.get(KIOSK_KEY_COOKIE) or "").strip()


def kiosk_required(devices: DeviceService) -> Callable:
    """Resolve the calling kiosk once and hand it to the view as ``kiosk``."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            kiosk = devices.authenticate(kiosk_key_from_request())
            return view(*args, kiosk=kiosk, **kwargs)

        return wrapper

    return decorator


def current_admin() -> AdminContext | None:
    return AdminContext.from_session(session.get(ADMIN_SESSION_KEY))


def admin_required(view):
    """Pass the signed-in admin to the view as ``admin``."""

    @wraps(view)
    def wrapper(*args, **kwargs):
        admin = current_admin()
        if not admin:
            raise UnauthorizedError("not_signed_in")
        return view(*args, admin=admin, **kwargs)

    return wrapper
