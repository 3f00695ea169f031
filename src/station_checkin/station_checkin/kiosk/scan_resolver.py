from __future__ import annotations

from typing import Any

from ..auth.context import KioskContext
from ..common.phone import normalize_au_mobile
from ..common.validators import parse_id
from ..core.enums import MatchedBy, MemberStatus
from ..members.model import Member
from ..members.repository import MemberRepository
from .model import Candidate, Resolution


class ScanResolver:
    """Turn whatever was typed or scanned at a kiosk into a member.

    Order: RFID tag (anything with a non-digit), then member number (digits
    only), then Australian mobile number. Only the mobile lookup can match
    more than one member.
    """

    def __init__(self, members: MemberRepository):
        self._members = members

    def resolve(self, identifier: Any, kiosk: KioskContext) -> Resolution:
        raw = str(identifier or "").strip()
        if not raw:
            return Resolution.unknown()

        org_id = kiosk.organisation_id
        if raw.isdigit():
            member = self._members.find_by_number(org_id, raw)
            matched_by = MatchedBy.NUMBER
        else:
            member = self._members.find_by_tag(org_id, raw)
            matched_by = MatchedBy.TAG

        if member:
            return self._from_member(member, matched_by)

        mobile = normalize_au_mobile(raw)
        if not mobile:
            return Resolution.unknown()

        matches = sorted(
            self._members.find_active_by_mobile(org_id, mobile),
            key=lambda m: (m.last_name.lower(), m.first_name.lower(), m.member_id),
        )
        if not matches:
            return Resolution.unknown()
        if len(matches) > 1:
            return Resolution.ambiguous([Candidate.from_member(m) for m in matches])
        return Resolution.resolved(matches[0], MatchedBy.PHONE)

    def resolve_member_id(self, member_id: Any, kiosk: KioskContext) -> Resolution:
        """Explicit pick after an ambiguous scan."""
        parsed = parse_id(member_id)
        if parsed is None:
            return Resolution.unknown()

        member = self._members.get_by_id(parsed)
        if (
            not member
            or member.organisation_id != kiosk.organisation_id
            or member.is_visitor
            or member.status == MemberStatus.ARCHIVED
        ):
            return Resolution.unknown()
        return self._from_member(member, None)

    @staticmethod
    def _from_member(member: Member, matched_by) -> Resolution:
        if not member.is_active:
            return Resolution.disabled(member)
        return Resolution(member=member, matched_by=matched_by)
