"""Models package with all models."""
from .base import BaseModel
from .user import User, UserRole
from .course import Course
from .enrollment import ClassEnrollment
from .attendance_session import AttendanceSession
from .attendance import AttendanceRecord

__all__ = [
    'BaseModel', 'User', 'UserRole', 'Course',
    'ClassEnrollment', 'AttendanceSession', 'AttendanceRecord'
]
