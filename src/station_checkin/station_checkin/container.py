from __future__ import annotations

from dataclasses import dataclass
from types import ModuleType
from typing import Any, Mapping, Optional

from .auth.service import AdminAuthService
from .categories.mysql_category_repository import MySQLCategoryRepository
from .categories.repository import CategoryRepository
from .categories.service import CategoryService
from .core.constants import DEFAULT_CHECKOUT_TOLERANCE_MINUTES, DEFAULT_VISITOR_END_MAX_FUTURE_HOURS
from .database.connection import DBConfig, DatabaseConnection
from .devices.mysql_device_repository import MySQLDeviceRepository
from .devices.repository import DeviceRepository
from .devices.service import DeviceService
from .kiosk.scan_resolver import ScanResolver
from .kiosk.service import KioskService
from .members.mysql_member_repository import MySQLMemberRepository
from .members.repository import MemberRepository
from .members.service import MemberService
from .organisations.mysql_organisation_repository import MySQLOrganisationRepository
from .organisations.repository import OrganisationRepository
from .reports.service import ActivityReportService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository


@dataclass(frozen=True)
class Container:
    organisations_repo: OrganisationRepository
    members_repo: MemberRepository
    devices_repo: DeviceRepository
    categories_repo: CategoryRepository
    sessions_repo: SessionRepository

    admin_auth_service: AdminAuthService
    device_service: DeviceService
    kiosk_service: KioskService
    category_service: CategoryService
    member_service: MemberService
    report_service: ActivityReportService

    conn: Optional[DatabaseConnection] = None


def _setting(settings: Any, name: str, default: Any = None) -> Any:
    if isinstance(settings, Mapping):
        return settings.get(name, default)
    return getattr(settings, name, default)


def assemble_container(
    *,
    organisations_repo: OrganisationRepository,
    members_repo: MemberRepository,
    devices_repo: DeviceRepository,
    categories_repo: CategoryRepository,
    sessions_repo: SessionRepository,
    settings: ModuleType | Mapping[str, Any],
    conn: Optional[DatabaseConnection] = None,
    clock=None,
) -> Container:
    """Wire services over any set of repositories (MySQL or in-memory)."""
    extra = {"clock": clock} if clock else {}

    admin_auth_service = AdminAuthService(
        organisations_repo,
        username=_setting(settings, "ADMIN_USERNAME"),
        password=_setting(settings, "ADMIN_PASSWORD"),
    )
    device_service = DeviceService(
        devices_repo,
        organisations_repo,
        pepper=str(_setting(settings, "KIOSK_INVITE_PEPPER", "")),
        **extra,
    )
    kiosk_service = KioskService(
        sessions_repo,
        categories_repo,
        ScanResolver(members_repo),
        tolerance_minutes=int(_setting(settings, "CHECKOUT_TOLERANCE_MINUTES", DEFAULT_CHECKOUT_TOLERANCE_MINUTES)),
        visitor_end_max_future_hours=int(
            _setting(settings, "VISITOR_END_MAX_FUTURE_HOURS", DEFAULT_VISITOR_END_MAX_FUTURE_HOURS)
        ),
        **extra,
    )

    return Container(
        organisations_repo=organisations_repo,
        members_repo=members_repo,
        devices_repo=devices_repo,
        categories_repo=categories_repo,
        sessions_repo=sessions_repo,
        admin_auth_service=admin_auth_service,
        device_service=device_service,
        kiosk_service=kiosk_service,
        category_service=CategoryService(categories_repo),
        member_service=MemberService(members_repo),
        report_service=ActivityReportService(sessions_repo, members_repo, categories_repo),
        conn=conn,
    )


def build_container(*, db_config: Mapping[str, Any], settings: ModuleType | Mapping[str, Any]) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))

    return assemble_container(
        organisations_repo=MySQLOrganisationRepository(conn),
        members_repo=MySQLMemberRepository(conn),
        devices_repo=MySQLDeviceRepository(conn),
        categories_repo=MySQLCategoryRepository(conn),
        sessions_repo=MySQLSessionRepository(conn),
        settings=settings,
        conn=conn,
    )
