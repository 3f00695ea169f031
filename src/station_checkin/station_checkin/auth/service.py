from __future__ import annotations

import hmac
import logging
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..core.enums import AdminRole
from ..core.exceptions import NotFoundError, UnauthorizedError
from ..organisations.repository import OrganisationRepository
from .context import AdminContext

logger = logging.getLogger(__name__)


class AdminAuthService:
    """Use case: authenticate the configured station administrator (login).

    Only a werkzeug hash of the password is kept in memory.
    """

    def __init__(
        self,
        organisations: OrganisationRepository,
        *,
        username: Optional[str],
        password: Optional[str],
    ):
        self._organisations = organisations
        self._username = (username or "").strip()
        self._password_hash = generate_password_hash(password) if password else None

    def authenticate(self, username: str, password: str) -> AdminContext:
        if not self._username or not self._password_hash:
            raise UnauthorizedError("invalid_credentials")

        given = (username or "").strip()
        name_ok = hmac.compare_digest(given.lower().encode("utf-8"), self._username.lower().encode("utf-8"))
        password_ok = check_password_hash(self._password_hash, password or "")
        if not (name_ok and password_ok):
            logger.warning("admin login rejected for %r", given)
            raise UnauthorizedError("invalid_credentials")

        organisation = self._organisations.get_first()
        if not organisation:
            raise NotFoundError("organisation_not_found")

        return AdminContext(
            user_id=f"env-{self._username}",
            email=self._username,
            role=AdminRole.OWNER,
            organisation_id=organisation.organisation_id,
            name=self._username,
        )
