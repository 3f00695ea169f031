from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Member, MemberChanges


class MemberRepository(Protocol):
    """Repository interface for members and their RFID tags.

    Note (DIP): services depend on this interface, never on a concrete DB.
    Lookups used by kiosks never return visitor or archived rows.
    """

    def get_by_id(self, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def find_by_tag(self, organisation_id: int, tag_value: str) -> Optional[Member]:
        raise NotImplementedError

    def find_by_number(self, organisation_id: int, member_number: str) -> Optional[Member]:
        raise NotImplementedError

    def find_active_by_mobile(self, organisation_id: int, mobile_normalized: str) -> Sequence[Member]:
        """All active non-visitor members sharing the number, by last/first name."""

        raise NotImplementedError

    def list_members(self, organisation_id: int) -> Sequence[Member]:
        raise NotImplementedError

    def get_active_tag_value(self, member_id: int) -> Optional[str]:
        raise NotImplementedError

    def count_members(self, organisation_id: int) -> int:
        raise NotImplementedError

    def create_member(
        self,
        *,
        organisation_id: int,
        member_number: str,
        first_name: str,
        last_name: str,
        mobile: Optional[str],
        mobile_normalized: Optional[str],
    ) -> int:
        raise NotImplementedError

    def update_member(
        self,
        *,
        organisation_id: int,
        member_id: int,
        changes: MemberChanges,
        rfid_tag: Optional[str] = None,
    ) -> None:
        """Apply changes and the tag assignment in one transaction.

        ``rfid_tag == ""`` clears the member's active tags; a non-empty value
        assigns (or moves) that tag to the member.
        """

        raise NotImplementedError
