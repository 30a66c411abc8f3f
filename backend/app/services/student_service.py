"""Student attendance history and summary service."""
from typing import Dict, Tuple
from sqlalchemy import distinct, func
from app import db
from app.models.attendance import AttendanceRecord
from app.models.attendance_session import AttendanceSession
from app.models.course import Course
from app.models.enrollment import ClassEnrollment

class StudentService:
    """Read-side queries over a student's attendance."""

    @staticmethod
    def get_attendance_history(student_id: str, page: int = 1, per_page: int = 20) -> Tuple[list, int]:
        """
        Get a page of the student's attendance records, newest first.
        Returns: (records, total)
        """
        query = db.session.query(AttendanceRecord, AttendanceSession, Course).join(
            AttendanceSession, AttendanceRecord.session_id == AttendanceSession.id
        ).join(
            Course, AttendanceSession.class_id == Course.id
        ).filter(
            AttendanceRecord.student_id == student_id
        )

        total = query.count()
        rows = query.order_by(AttendanceRecord.scanned_at.desc()).offset(
            (page - 1) * per_page
        ).limit(per_page).all()

        records = []
        for record, session, course in rows:
            data = record.to_dict()
            data['class'] = {
                'id': course.id,
                'code': course.code,
                'name': course.name
            }
            data['session_expires_at'] = session.expires_at.isoformat()
            records.append(data)

        return records, total

    @staticmethod
    def get_attendance_summary(student_id: str) -> Dict:
        """Attended vs. held sessions across the student's enrolled classes."""
        class_ids = [
            class_id for (class_id,) in db.session.query(ClassEnrollment.class_id).filter(
                ClassEnrollment.student_id == student_id
            ).all()
        ]

        if not class_ids:
            return {
                'enrolled_classes': 0,
                'total_sessions': 0,
                'attended_sessions': 0,
                'attendance_percentage': 0.0
            }

        total_sessions = AttendanceSession.query.filter(
            AttendanceSession.class_id.in_(class_ids)
        ).count()

        attended_sessions = db.session.query(
            func.count(distinct(AttendanceRecord.session_id))
        ).select_from(
            AttendanceRecord
        ).join(
            AttendanceSession, AttendanceRecord.session_id == AttendanceSession.id
        ).filter(
            AttendanceRecord.student_id == student_id,
            AttendanceSession.class_id.in_(class_ids)
        ).scalar() or 0

        percentage = 0.0
        if total_sessions:
            percentage = round(attended_sessions * 100.0 / total_sessions, 1)

        return {
            'enrolled_classes': len(class_ids),
            'total_sessions': total_sessions,
            'attended_sessions': attended_sessions,
            'attendance_percentage': percentage
        }
