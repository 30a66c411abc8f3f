"""Data access for attendance verification."""
from typing import Callable, Optional
from datetime import datetime

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from app.models.attendance import AttendanceRecord
from app.models.attendance_session import AttendanceSession
from app.models.enrollment import ClassEnrollment
from app.utils.helpers import utcnow

class PersistenceFailure(Exception):
    """The storage backend failed to complete an operation."""

class DuplicateAttendanceError(PersistenceFailure):
    """A record for the (session, student) pair already exists."""

class SQLAlchemyAttendanceStore:
    """Storage collaborator backed by a SQLAlchemy session."""

    def __init__(self, session, now_func: Callable[[], datetime] = utcnow):
        self.session = session
        self.now_func = now_func

    def get_session(self, session_id: str) -> Optional[AttendanceSession]:
        try:
            return self.session.get(AttendanceSession, session_id)
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not load session: {e}") from e

    def find_enrollment(self, student_id: str, class_id: str) -> Optional[ClassEnrollment]:
        """Zero-or-one lookup; a missing enrollment is a normal outcome."""
        try:
            return self.session.query(ClassEnrollment).filter_by(
                student_id=student_id,
                class_id=class_id
            ).first()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not check enrollment: {e}") from e

    def find_attendance_record(self, session_id: str, student_id: str) -> Optional[AttendanceRecord]:
        try:
            return self.session.query(AttendanceRecord).filter_by(
                session_id=session_id,
                student_id=student_id
            ).first()
        except SQLAlchemyError as e:
            raise PersistenceFailure(f"Could not load attendance record: {e}") from e

    def insert_attendance_record(
        self,
        session_id: str,
        student_id: str,
        location_verified: bool,
        device_info: str
    ) -> AttendanceRecord:
        record = AttendanceRecord(
            session_id=session_id,
            student_id=student_id,
            location_verified=bool(location_verified),
            device_info=device_info,
            scanned_at=self.now_func()
        )

        try:
            self.session.add(record)
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateAttendanceError(
                f"Attendance already recorded for session {session_id}"
            ) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise PersistenceFailure(f"Could not save attendance record: {e}") from e

        return record
