"""Attendance verification for scanned session QR codes."""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple

from app.services.attendance_store import DuplicateAttendanceError, PersistenceFailure
from app.services.gps_service import (
    GeoPoint, Geofence, GeolocationOptions, GeolocationProvider,
    GPSService, LocationUnavailableError
)
from app.services.qr_service import QRService
from app.utils.helpers import utcnow

logger = logging.getLogger(__name__)

class ScanState(Enum):
    """Pipeline states."""
    VALIDATING = "validating"
    RESOLVING_SESSION = "resolving_session"
    CHECKING_ENROLLMENT = "checking_enrollment"
    EVALUATING_GEOFENCE = "evaluating_geofence"
    RECORDING = "recording"
    ACCEPTED = "accepted"
    REJECTED = "rejected"

class RejectionKind(Enum):
    """Closed set of reasons a scan is rejected."""
    INVALID_FORMAT = "invalid_format"
    SESSION_NOT_FOUND = "session_not_found"
    SESSION_EXPIRED = "session_expired"
    NOT_ENROLLED = "not_enrolled"
    LOCATION_UNAVAILABLE = "location_unavailable"
    OUTSIDE_GEOFENCE = "outside_geofence"
    PERSISTENCE_ERROR = "persistence_error"

@dataclass(frozen=True)
class Rejection:
    """Typed rejection with a message fit to show the student."""
    kind: RejectionKind
    message: str
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind.value,
            'message': self.message,
            'details': self.details
        }

@dataclass
class ScanResult:
    """Outcome of one scan: an attendance record or a rejection."""
    state: ScanState
    record: Any = None
    rejection: Optional[Rejection] = None
    failed_stage: Optional[ScanState] = None
    distance_meters: Optional[float] = None
    duplicate: bool = False

    @property
    def accepted(self) -> bool:
        return self.state == ScanState.ACCEPTED

@dataclass(frozen=True)
class ResolvedSession:
    """What the later stages need to know about a session."""
    session_id: str
    class_id: str
    geofence: Optional[Geofence]

class AttendanceVerificationService:
    """
    Verifies a scanned QR code and records attendance.

    Stages run strictly in order and the first failure ends the scan:
    1. Token validation (payload format)
    2. Session resolution (exists, active, not expired)
    3. Enrollment check (caller belongs to the session's class)
    4. Geofence evaluation (only when the session requires location)
    5. Recording

    Nothing is persisted unless every earlier stage passed. A repeated scan
    for a (session, student) pair that already has a record returns that
    record instead of creating a second one.
    """

    DEFAULT_GEOFENCE_RADIUS_METERS = 100

    def __init__(
        self,
        store,
        geolocation_options: Optional[GeolocationOptions] = None,
        default_radius_meters: float = DEFAULT_GEOFENCE_RADIUS_METERS,
        now_func: Callable[[], datetime] = utcnow
    ):
        self.store = store
        self.geolocation_options = geolocation_options or GeolocationOptions()
        self.default_radius_meters = default_radius_meters
        self.now_func = now_func

    def verify_and_record(
        self,
        qr_data: str,
        student_id: str,
        location_provider: GeolocationProvider,
        device_info: Optional[str] = None
    ) -> ScanResult:
        """Run the full pipeline for one scan by ``student_id``."""
        # 1. Token
        session_id, rejection = self.validate_token(qr_data)
        if rejection:
            return self._reject(ScanState.VALIDATING, rejection, student_id)

        # 2. Session
        session, rejection = self.resolve_session(session_id)
        if rejection:
            return self._reject(ScanState.RESOLVING_SESSION, rejection, student_id)

        # 3. Enrollment
        rejection = self.check_enrollment(student_id, session.class_id)
        if rejection:
            return self._reject(ScanState.CHECKING_ENROLLMENT, rejection, student_id)

        # 4. Geofence
        location_verified = False
        distance = None
        if session.geofence is not None:
            distance, rejection = self.evaluate_geofence(session.geofence, location_provider)
            if rejection:
                return self._reject(ScanState.EVALUATING_GEOFENCE, rejection, student_id, distance)
            location_verified = True

        # 5. Record
        record, duplicate, rejection = self.record_attendance(
            session.session_id, student_id, location_verified, device_info
        )
        if rejection:
            return self._reject(ScanState.RECORDING, rejection, student_id, distance)

        logger.info(
            "Attendance accepted: session=%s student=%s location_verified=%s duplicate=%s",
            session.session_id, student_id, location_verified, duplicate
        )
        return ScanResult(
            state=ScanState.ACCEPTED,
            record=record,
            distance_meters=distance,
            duplicate=duplicate
        )

    # =================== STAGES ===================

    @staticmethod
    def validate_token(qr_data: str) -> Tuple[Optional[str], Optional[Rejection]]:
        is_valid, session_id, error_msg = QRService.validate_qr_code(qr_data)
        if not is_valid:
            return None, Rejection(RejectionKind.INVALID_FORMAT, error_msg)
        return session_id, None

    def resolve_session(self, session_id: str) -> Tuple[Optional[ResolvedSession], Optional[Rejection]]:
        try:
            session = self.store.get_session(session_id.lower())
        except PersistenceFailure as e:
            logger.exception("Session lookup failed for %s", session_id)
            return None, Rejection(
                RejectionKind.PERSISTENCE_ERROR,
                "Could not load the attendance session. Please try again",
                {'reason': str(e)}
            )

        if session is None:
            return None, Rejection(
                RejectionKind.SESSION_NOT_FOUND,
                "This QR code does not belong to any attendance session"
            )

        now = self.now_func()
        if not session.accepts_scans(now):
            if not session.is_active:
                return None, Rejection(
                    RejectionKind.SESSION_EXPIRED,
                    "This attendance session has been closed",
                    {'is_active': False}
                )
            return None, Rejection(
                RejectionKind.SESSION_EXPIRED,
                "This attendance session has expired",
                {'expires_at': session.expires_at.isoformat()}
            )

        geofence = None
        if session.location_required:
            if session.location_latitude is None or session.location_longitude is None:
                logger.error("Session %s requires location but has no center", session.id)
                return None, Rejection(
                    RejectionKind.SESSION_EXPIRED,
                    "This attendance session is not accepting scans",
                    {'reason': 'location_not_configured'}
                )
            geofence = Geofence(
                center=GeoPoint(session.location_latitude, session.location_longitude),
                radius_meters=session.effective_radius(self.default_radius_meters)
            )

        return ResolvedSession(session.id, session.class_id, geofence), None

    def check_enrollment(self, student_id: str, class_id: str) -> Optional[Rejection]:
        try:
            enrollment = self.store.find_enrollment(student_id, class_id)
        except PersistenceFailure as e:
            logger.exception("Enrollment lookup failed for student %s", student_id)
            return Rejection(
                RejectionKind.PERSISTENCE_ERROR,
                "Could not check your enrollment. Please try again",
                {'reason': str(e)}
            )

        if enrollment is None:
            return Rejection(
                RejectionKind.NOT_ENROLLED,
                "You are not enrolled in the class for this session",
                {'class_id': class_id}
            )
        return None

    def evaluate_geofence(
        self,
        geofence: Geofence,
        location_provider: GeolocationProvider
    ) -> Tuple[Optional[float], Optional[Rejection]]:
        try:
            point = location_provider.current_position(self.geolocation_options)
        except LocationUnavailableError as e:
            return None, Rejection(
                RejectionKind.LOCATION_UNAVAILABLE,
                e.message,
                {'code': e.code}
            )

        result = GPSService.verify_location(point, geofence)
        distance = result['distance']
        if not result['is_inside']:
            return distance, Rejection(
                RejectionKind.OUTSIDE_GEOFENCE,
                f"You are {distance:.0f} m from the class location; "
                f"scans are accepted within {geofence.radius_meters:.0f} m",
                {'distance': distance, 'radius': result['radius']}
            )
        return distance, None

    def record_attendance(
        self,
        session_id: str,
        student_id: str,
        location_verified: bool,
        device_info: Optional[str]
    ) -> Tuple[Any, bool, Optional[Rejection]]:
        """Returns: (record, duplicate, rejection)"""
        try:
            existing = self.store.find_attendance_record(session_id, student_id)
            if existing is not None:
                return existing, True, None

            try:
                record = self.store.insert_attendance_record(
                    session_id, student_id, location_verified, device_info or ''
                )
                return record, False, None
            except DuplicateAttendanceError:
                # Lost a race against a concurrent scan for the same pair
                existing = self.store.find_attendance_record(session_id, student_id)
                if existing is not None:
                    return existing, True, None
                raise
        except PersistenceFailure as e:
            logger.exception("Failed to record attendance for session %s", session_id)
            return None, False, Rejection(
                RejectionKind.PERSISTENCE_ERROR,
                "Could not save your attendance. Please scan again",
                {'reason': str(e)}
            )

    # =================== HELPERS ===================

    @staticmethod
    def _reject(
        stage: ScanState,
        rejection: Rejection,
        student_id: str,
        distance: Optional[float] = None
    ) -> ScanResult:
        logger.info(
            "Attendance rejected at %s: kind=%s student=%s message=%s",
            stage.value, rejection.kind.value, student_id, rejection.message
        )
        return ScanResult(
            state=ScanState.REJECTED,
            rejection=rejection,
            failed_stage=stage,
            distance_meters=distance
        )
