"""Attendance session scanned through its QR code."""
from datetime import datetime
from typing import Optional
from app import db
from app.models.base import BaseModel
from app.utils.helpers import utcnow

class AttendanceSession(BaseModel):
    """Time-boxed attendance window for a class, optionally geofenced.

    The session ``id`` is the payload encoded in the QR code.
    """
    
    __tablename__ = 'attendance_sessions'
    __table_args__ = (
        db.CheckConstraint(
            'NOT location_required OR '
            '(location_latitude IS NOT NULL AND location_longitude IS NOT NULL)',
            name='ck_session_location_center'
        ),
        db.CheckConstraint(
            'location_radius IS NULL OR location_radius > 0',
            name='ck_session_location_radius'
        ),
    )
    
    class_id = db.Column(db.String(36), db.ForeignKey('classes.id'), nullable=False, index=True)
    lecturer_id = db.Column(db.String(36), db.ForeignKey('users.id'), nullable=False)
    expires_at = db.Column(db.DateTime, nullable=False)
    is_active = db.Column(db.Boolean, default=True, nullable=False)
    
    # Geofence
    location_required = db.Column(db.Boolean, default=False, nullable=False)
    location_latitude = db.Column(db.Float, nullable=True)
    location_longitude = db.Column(db.Float, nullable=True)
    location_radius = db.Column(db.Float, nullable=True)  # meters
    
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow, nullable=False)
    
    # Relationships
    records = db.relationship('AttendanceRecord', backref='session', lazy='dynamic')
    
    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Expiry is exclusive: the session is valid strictly before ``expires_at``."""
        now = now or utcnow()
        return now >= self.expires_at
    
    def accepts_scans(self, now: Optional[datetime] = None) -> bool:
        return bool(self.is_active) and not self.is_expired(now)
    
    def effective_radius(self, default: float = 100) -> float:
        """Configured radius in meters, or ``default`` when unset."""
        return self.location_radius if self.location_radius is not None else default
    
