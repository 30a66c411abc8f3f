"""Class enrollment model."""
from app import db
from app.models.base import BaseModel
from app.utils.helpers import utcnow

class ClassEnrollment(BaseModel):
    """Links a student to a class. Presence is the whole record."""
    
    __tablename__ = 'class_enrollments'
    __table_args__ = (
        db.UniqueConstraint('student_id', 'class_id', name='uq_enrollment_student_class'),
    )
    
    student_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False, index=True)
    class_id = db.Column(db.String(36), db.ForeignKey('classes.id'), nullable=False, index=True)
    enrolled_at = db.Column(db.DateTime, default=utcnow, nullable=False)
    
    def __repr__(self):
        return f'<ClassEnrollment {self.student_id}-{self.class_id}>'
