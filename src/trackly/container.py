from __future__ import annotations

from dataclasses import dataclass

from .admin_settings.mysql_settings_repository import MySQLAdminSettingsRepository
from .admin_settings.service import AdminSettingsService
from .database.connection import DBConfig, DatabaseConnection
from .functions.gateway import HttpFunctionGateway
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.service import HolidayService
from .hours.mysql_hours_repository import MySQLTimeRecordRepository
from .hours.service import HoursService
from .notifications.sender import GatewayPushSender
from .notifications.service import NotificationService
from .projects.mysql_project_repository import MySQLProjectRepository
from .projects.service import ProjectService
from .realtime.feed import SnapshotFeed
from .reports.mysql_report_repository import MySQLReportRepository
from .reports.service import ReportService
from .stats.service import AdminStatsService
from .statuses.mysql_status_repository import MySQLStatusRepository
from .statuses.service import StatusRegistry
from .task_types.mysql_task_type_repository import MySQLTaskTypeRepository
from .task_types.service import TaskTypeService
from .tasks.mysql_task_repository import MySQLTaskRepository
from .tasks.service import TaskService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService
from .work_items.mysql_work_item_repository import MySQLWorkItemRepository
from .work_items.service import WorkItemService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection
    feed: SnapshotFeed
    gateway: HttpFunctionGateway

    users_repo: MySQLUserRepository
    records_repo: MySQLTimeRecordRepository
    statuses_repo: MySQLStatusRepository
    work_items_repo: MySQLWorkItemRepository
    reports_repo: MySQLReportRepository
    holidays_repo: MySQLHolidayRepository
    settings_repo: MySQLAdminSettingsRepository
    projects_repo: MySQLProjectRepository
    tasks_repo: MySQLTaskRepository
    task_types_repo: MySQLTaskTypeRepository

    auth_service: AuthService
    user_service: UserService
    project_service: ProjectService
    task_service: TaskService
    task_type_service: TaskTypeService
    hours_service: HoursService
    status_registry: StatusRegistry
    work_item_service: WorkItemService
    report_service: ReportService
    holiday_service: HolidayService
    settings_service: AdminSettingsService
    stats_service: AdminStatsService
    notification_service: NotificationService


def build_container(*, db_config: dict, functions_base_url: str = "", functions_timeout: float = 30.0) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    feed = SnapshotFeed()
    gateway = HttpFunctionGateway(functions_base_url, timeout=functions_timeout)

    users_repo = MySQLUserRepository(conn)
    records_repo = MySQLTimeRecordRepository(conn)
    statuses_repo = MySQLStatusRepository(conn)
    work_items_repo = MySQLWorkItemRepository(conn)
    reports_repo = MySQLReportRepository(conn)
    holidays_repo = MySQLHolidayRepository(conn)
    settings_repo = MySQLAdminSettingsRepository(conn)
    projects_repo = MySQLProjectRepository(conn)
    tasks_repo = MySQLTaskRepository(conn)
    task_types_repo = MySQLTaskTypeRepository(conn)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, feed=feed)
    project_service = ProjectService(projects_repo, feed=feed)
    task_service = TaskService(tasks_repo, feed=feed)
    task_type_service = TaskTypeService(task_types_repo, feed=feed)
    hours_service = HoursService(
        records_repo,
        users_repo,
        projects=project_service,
        tasks=task_service,
        task_types=task_type_service,
        feed=feed,
    )
    status_registry = StatusRegistry(statuses_repo, feed=feed)
    work_item_service = WorkItemService(work_items_repo, status_registry, feed=feed)
    report_service = ReportService(reports_repo, hours_service, feed=feed)
    holiday_service = HolidayService(holidays_repo, feed=feed)
    settings_service = AdminSettingsService(settings_repo, feed=feed)
    stats_service = AdminStatsService(records_repo, users_repo, holiday_service, settings_service)
    notification_service = NotificationService(users_repo, settings_service, GatewayPushSender(gateway))

    return Container(
        conn=conn,
        feed=feed,
        gateway=gateway,
        users_repo=users_repo,
        records_repo=records_repo,
        statuses_repo=statuses_repo,
        work_items_repo=work_items_repo,
        reports_repo=reports_repo,
        holidays_repo=holidays_repo,
        settings_repo=settings_repo,
        projects_repo=projects_repo,
        tasks_repo=tasks_repo,
        task_types_repo=task_types_repo,
        auth_service=auth_service,
        user_service=user_service,
        project_service=project_service,
        task_service=task_service,
        task_type_service=task_type_service,
        hours_service=hours_service,
        status_registry=status_registry,
        work_item_service=work_item_service,
        report_service=report_service,
        holiday_service=holiday_service,
        settings_service=settings_service,
        stats_service=stats_service,
        notification_service=notification_service,
    )
