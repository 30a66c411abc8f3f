"""Database seeding service for demo data."""
from datetime import timedelta
from typing import Dict
from app import db
from app.models.user import User, UserRole
from app.models.course import Course
from app.models.enrollment import ClassEnrollment
from app.models.attendance_session import AttendanceSession
from app.utils.helpers import utcnow

class SeedService:
    """Service to seed database with demo data."""

    # Campus center used for the geofenced demo session
    CAMPUS_LATITUDE = 33.3152
    CAMPUS_LONGITUDE = 44.3661

    @staticmethod
    def seed_all() -> Dict[str, str]:
        """Seed all demo data and return the identifiers worth knowing."""
        lecturer = SeedService._get_or_create_user(
            'lecturer@university.edu', 'Dr. Ahmed Hassan', UserRole.LECTURER
        )
        student = SeedService._get_or_create_user(
            'student@university.edu', 'Mohammed Ali', UserRole.STUDENT,
            student_reg_no='CS2021001'
        )

        course = Course.query.filter_by(code='CS101').first()
        if not course:
            course = Course(
                code='CS101',
                name='Introduction to Programming',
                lecturer_id=lecturer.id
            )
            db.session.add(course)
            db.session.flush()

        if not ClassEnrollment.query.filter_by(student_id=student.id, class_id=course.id).first():
            db.session.add(ClassEnrollment(student_id=student.id, class_id=course.id))

        expires_at = utcnow() + timedelta(hours=1)
        open_session = AttendanceSession(
            class_id=course.id,
            lecturer_id=lecturer.id,
            expires_at=expires_at
        )
        geofenced_session = AttendanceSession(
            class_id=course.id,
            lecturer_id=lecturer.id,
            expires_at=expires_at,
            location_required=True,
            location_latitude=SeedService.CAMPUS_LATITUDE,
            location_longitude=SeedService.CAMPUS_LONGITUDE,
            location_radius=100
        )
        db.session.add_all([open_session, geofenced_session])
        db.session.commit()

        return {
            'lecturer': lecturer.email,
            'student': student.email,
            'class': course.code,
            'open_session': open_session.id,
            'geofenced_session': geofenced_session.id
        }

    @staticmethod
    def _get_or_create_user(email: str, full_name: str, role: UserRole, **extra) -> User:
        user = User.query.filter_by(email=email).first()
        if not user:
            user = User(email=email, full_name=full_name, role=role, **extra)
            db.session.add(user)
            db.session.flush()
        return user
