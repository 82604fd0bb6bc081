from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .archive.cleanup import CleanupEngine
from .archive.mysql_archive_repository import MySQLArchiveStatusRepository
from .archive.scheduler import CleanupScheduler
from .archive.tracker import ArchiveStatusTracker
from .assessments.mysql_assessment_repository import MySQLAssessmentRepository
from .assessments.service import AssessmentService
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceSessionService
from .common.datetime_utils import now_local
from .database.connection import DBConfig, DatabaseConnection
from .images.store import ImageStore, LocalImageStore
from .submissions.mysql_submission_repository import MySQLSubmissionRepository
from .submissions.service import SubmissionService
from .users.mysql_user_repository import MySQLUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    users_repo: MySQLUserRepository
    attendance_repo: MySQLAttendanceRepository
    assessments_repo: MySQLAssessmentRepository
    archive_repo: MySQLArchiveStatusRepository
    submissions_repo: MySQLSubmissionRepository
    image_store: ImageStore

    auth_service: AuthService
    user_service: UserService
    attendance_service: AttendanceSessionService
    assessment_service: AssessmentService
    submission_service: SubmissionService
    archive_tracker: ArchiveStatusTracker
    cleanup_engine: CleanupEngine
    cleanup_scheduler: CleanupScheduler


def build_container(
    *,
    db_config: dict,
    image_upload_dir: str,
    image_base_url: str = "/uploads",
    clock: Optional[Callable] = None,
) -> Container:
    clock = clock or now_local
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    users_repo = MySQLUserRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    assessments_repo = MySQLAssessmentRepository(conn)
    archive_repo = MySQLArchiveStatusRepository(conn)
    submissions_repo = MySQLSubmissionRepository(conn)
    image_store = LocalImageStore(image_upload_dir, base_url=image_base_url)

    archive_tracker = ArchiveStatusTracker(archive_repo, clock=clock)
    cleanup_engine = CleanupEngine(
        archive_tracker,
        attendance_repo,
        assessments_repo,
        archive_repo,
        image_store,
        clock=clock,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        attendance_repo=attendance_repo,
        assessments_repo=assessments_repo,
        archive_repo=archive_repo,
        submissions_repo=submissions_repo,
        image_store=image_store,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, attendance_repo),
        attendance_service=AttendanceSessionService(attendance_repo, image_store, clock=clock),
        assessment_service=AssessmentService(assessments_repo, users_repo, clock=clock),
        submission_service=SubmissionService(submissions_repo, users_repo, clock=clock),
        archive_tracker=archive_tracker,
        cleanup_engine=cleanup_engine,
        cleanup_scheduler=CleanupScheduler(cleanup_engine, archive_tracker, clock=clock),
    )
