from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..auth.context import AdminContext
from ..common.phone import normalize_au_mobile
from ..common.validators import optional_text, require_id, require_member_number, require_non_empty
from ..core.enums import MemberStatus
from ..core.exceptions import NotFoundError, ValidationError
from .model import Member, MemberChanges
from .repository import MemberRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MemberDetail:
    member: Member
    rfid_tag: Optional[str] = None


def _mobile_pair(raw: Optional[str]) -> tuple[Optional[str], Optional[str]]:
    """(as typed, normalised); blank input gives (None, None)."""
    text = optional_text(raw)
    if text is None:
        return None, None
    normalized = normalize_au_mobile(text)
    if not normalized:
        raise ValidationError("mobile_invalid")
    return text, normalized


class MemberService:
    """Admin use cases for the member roster.

    Members are never deleted: archiving hides them from kiosks while their
    past sessions stay reportable.
    """

    def __init__(self, members: MemberRepository):
        self._members = members

    def list_members(self, admin: AdminContext) -> Sequence[Member]:
        return self._members.list_members(admin.organisation_id)

    def get_member(self, admin: AdminContext, member_id: Any) -> MemberDetail:
        member = self._get_owned(admin, member_id)
        return MemberDetail(member=member, rfid_tag=self._members.get_active_tag_value(member.member_id))

    def create_member(
        self,
        admin: AdminContext,
        *,
        member_number: Optional[str],
        first_name: Optional[str],
        last_name: Optional[str],
        mobile: Optional[str] = None,
    ) -> Member:
        number = require_member_number(member_number)
        first = require_non_empty(first_name, "first_name")
        last = require_non_empty(last_name, "last_name")
        mobile_text, mobile_normalized = _mobile_pair(mobile)

        member_id = self._members.create_member(
            organisation_id=admin.organisation_id,
            member_number=number,
            first_name=first,
            last_name=last,
            mobile=mobile_text,
            mobile_normalized=mobile_normalized,
        )
        logger.info("member %s (%s) created by %s", member_id, number, admin.email)
        return self._get_owned(admin, member_id)

    def update_member(
        self,
        admin: AdminContext,
        member_id: Any,
        *,
        member_number: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        mobile: Optional[str] = None,
        status: Optional[str] = None,
        rfid_tag: Optional[str] = None,
    ) -> MemberDetail:
        """Only the fields given are changed; ``rfid_tag=""`` removes the tag."""
        member = self._get_owned(admin, member_id)

        mobile_text = mobile_normalized = None
        if mobile is not None:
            mobile_text, mobile_normalized = _mobile_pair(mobile)
            if mobile_text is None:
                mobile_text = mobile_normalized = ""

        changes = MemberChanges(
            member_number=require_member_number(member_number) if member_number is not None else None,
            first_name=require_non_empty(first_name, "first_name") if first_name is not None else None,
            last_name=require_non_empty(last_name, "last_name") if last_name is not None else None,
            mobile=mobile_text,
            mobile_normalized=mobile_normalized,
            status=self._parse_status(status) if status is not None else None,
        )
        tag = rfid_tag.strip() if isinstance(rfid_tag, str) else None

        self._members.update_member(
            organisation_id=admin.organisation_id,
            member_id=member.member_id,
            changes=changes,
            rfid_tag=tag,
        )
        return self.get_member(admin, member.member_id)

    def archive_member(self, admin: AdminContext, member_id: Any) -> None:
        member = self._get_owned(admin, member_id)
        self._members.update_member(
            organisation_id=admin.organisation_id,
            member_id=member.member_id,
            changes=MemberChanges(status=MemberStatus.ARCHIVED),
        )
        logger.info("member %s archived by %s", member.member_id, admin.email)

    @staticmethod
    def _parse_status(value: str) -> MemberStatus:
        try:
            return MemberStatus(str(value).strip().lower())
        except ValueError:
            raise ValidationError("status_invalid")

    def _get_owned(self, admin: AdminContext, member_id: Any) -> Member:
        mid = require_id(member_id, "member_id")
        member = self._members.get_by_id(mid)
        if not member or member.organisation_id != admin.organisation_id or member.is_visitor:
            raise NotFoundError("member_not_found")
        return member
