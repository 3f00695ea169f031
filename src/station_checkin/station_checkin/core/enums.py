from __future__ import annotations

from enum import Enum


class MemberStatus(str, Enum):
    """Lifecycle of a member row. Archived members are hidden from kiosks."""

    ACTIVE = "active"
    DISABLED = "disabled"
    ARCHIVED = "archived"


class SessionStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"


class ScanStatus(str, Enum):
    """Outcome of resolving a scanned identifier at a kiosk."""

    UNKNOWN = "unknown"
    DISABLED = "disabled"
    AMBIGUOUS = "ambiguous"
    ALREADY_IN = "already_in"
    CHECKED_IN = "checked_in"


class MatchedBy(str, Enum):
    TAG = "tag"
    NUMBER = "number"
    PHONE = "phone"


class AdminRole(str, Enum):
    OWNER = "owner"
    ADMIN = "admin"
    STAFF = "staff"
    SUPER_ADMIN = "super_admin"
