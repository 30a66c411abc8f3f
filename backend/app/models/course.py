"""Class (course) model."""
from app import db
from app.models.base import BaseModel
from app.utils.helpers import utcnow

class Course(BaseModel):
    """A class taught by a lecturer that students enroll in."""
    
    __tablename__ = 'classes'
    
    code = db.Column(db.String(50), nullable=False)
    name = db.Column(db.String(255), nullable=False)
    description = db.Column(db.Text, nullable=True)
    lecturer_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    # Relationships
    lecturer = db.relationship('User', foreign_keys=[lecturer_id])
    enrollments = db.relationship('ClassEnrollment', backref='course', lazy='dynamic')
    sessions = db.relationship('AttendanceSession', backref='course', lazy='dynamic')
    
    def __repr__(self):
        return f'<Course {self.code}>'
