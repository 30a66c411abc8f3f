"""Attendance record model."""
from app import db
from app.models.base import BaseModel
from app.utils.helpers import utcnow

class AttendanceRecord(BaseModel):
    """One accepted scan by a student for a session. Never updated."""
    
    __tablename__ = 'attendance_records'
    __table_args__ = (
        db.UniqueConstraint('session_id', 'student_id', name='uq_attendance_session_student'),
    )
    
    session_id = db.Column(db.String(36), db.ForeignKey('attendance_sessions.id'), nullable=False, index=True)
    student_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    location_verified = db.Column(db.Boolean, default=False, nullable=False)
    device_info = db.Column(db.Text, nullable=True)  # opaque client descriptor
    scanned_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    
    def __repr__(self):
        return f'<AttendanceRecord {self.session_id}-{self.student_id}>'
