"""User model for lecturers and students."""
from enum import Enum
from app import db
from app.models.base import BaseModel
from app.utils.helpers import utcnow

class UserRole(Enum):
    """User roles enumeration."""
    LECTURER = 'lecturer'
    STUDENT = 'student'

class User(BaseModel):
    """User profile. Credentials are owned by the authentication provider."""
    
    __tablename__ = 'users'
    
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    full_name = db.Column(db.String(255), nullable=True)
    role = db.Column(db.Enum(UserRole), nullable=False, default=UserRole.STUDENT)
    student_reg_no = db.Column(db.String(50), unique=True, nullable=True, index=True)
    department = db.Column(db.String(100), nullable=True)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    # Relationships
    enrollments = db.relationship('ClassEnrollment', backref='student', lazy='dynamic')
    attendance_records = db.relationship('AttendanceRecord', backref='student', lazy='dynamic')
    
    def is_student(self) -> bool:
        """Check if user is a student."""
        return self.role == UserRole.STUDENT
    
    def __repr__(self) -> str:
        return f'<User {self.email}>'
