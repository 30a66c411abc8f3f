"""Attendance API endpoints for QR code scans."""
from flask import Blueprint, request, current_app
from flask_jwt_extended import jwt_required, get_jwt_identity, verify_jwt_in_request
from flask_limiter.util import get_remote_address
from app import db, limiter
from app.services.attendance_store import SQLAlchemyAttendanceStore
from app.services.attendance_verification_service import (
    AttendanceVerificationService, RejectionKind
)
from app.services.gps_service import GeolocationOptions, ReportedLocationProvider
from app.services.student_service import StudentService
from app.utils.decorators import student_required
from app.utils.helpers import success_response, error_response
from app.utils.validators import Validator

attendance_bp = Blueprint('attendance', __name__)

REJECTION_STATUS = {
    RejectionKind.INVALID_FORMAT: 400,
    RejectionKind.SESSION_NOT_FOUND: 404,
    RejectionKind.SESSION_EXPIRED: 410,
    RejectionKind.NOT_ENROLLED: 403,
    RejectionKind.LOCATION_UNAVAILABLE: 422,
    RejectionKind.OUTSIDE_GEOFENCE: 403,
    RejectionKind.PERSISTENCE_ERROR: 500,
}

def scan_rate_limit_key() -> str:
    """Count scans per student so a class behind one NAT is not throttled together."""
    # Limits are checked before jwt_required runs
    verify_jwt_in_request(optional=True)
    return get_jwt_identity() or get_remote_address()

def build_verification_service() -> AttendanceVerificationService:
    """Engine wired to the request's database session and app config."""
    config = current_app.config
    return AttendanceVerificationService(
        store=SQLAlchemyAttendanceStore(db.session),
        geolocation_options=GeolocationOptions.from_config(config),
        default_radius_meters=config.get('DEFAULT_GEOFENCE_RADIUS_METERS', 100)
    )

@attendance_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return success_response(message='Attendance service is running')

@attendance_bp.route('/scan-config', methods=['GET'])
@jwt_required()
def scan_config():
    """Geolocation options the client must request the device fix with."""
    options = GeolocationOptions.from_config(current_app.config)
    return success_response(
        data={
            'geolocation': options.to_dict(),
            'default_radius_meters': current_app.config.get('DEFAULT_GEOFENCE_RADIUS_METERS', 100)
        }
    )

@attendance_bp.route('/scan', methods=['POST'])
@jwt_required()
@student_required
@limiter.limit("30 per minute", key_func=scan_rate_limit_key)
def scan():
    """Verify a scanned session QR code and record attendance."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}

    try:
        current_user_id = get_jwt_identity()
        device_info = data.get('device_info') or request.headers.get('User-Agent', '')

        service = build_verification_service()
        result = service.verify_and_record(
            # Missing or malformed payloads are rejected by the token validator
            qr_data=data.get('qr_data'),
            student_id=current_user_id,
            location_provider=ReportedLocationProvider.from_payload(
                data, clock_skew_seconds=current_app.config.get('GEOLOCATION_CLOCK_SKEW_SECONDS', 30)
            ),
            device_info=str(device_info)
        )

        if not result.accepted:
            rejection = result.rejection
            return error_response(
                rejection.message,
                REJECTION_STATUS[rejection.kind],
                data={'rejection': rejection.to_dict()}
            )

        payload = result.record.to_dict()
        payload['duplicate'] = result.duplicate
        if result.distance_meters is not None:
            payload['distance_meters'] = round(result.distance_meters, 1)

        if result.duplicate:
            return success_response(data=payload, message="Attendance already recorded")
        return success_response(data=payload, message="Attendance marked successfully", status_code=201)

    except Exception as e:
        db.session.rollback()
        current_app.logger.exception("Unexpected error while marking attendance")
        return error_response(f"Error marking attendance: {str(e)}", 500)

@attendance_bp.route('/history', methods=['GET'])
@jwt_required()
@student_required
def history():
    """The current student's attendance records, newest first."""
    config = current_app.config
    per_page = Validator.parse_positive_int(
        request.args.get('per_page'), config['DEFAULT_PAGE_SIZE'], config['MAX_PAGE_SIZE']
    )
    page = Validator.parse_positive_int(request.args.get('page'), 1, 10 ** 6)

    records, total = StudentService.get_attendance_history(
        get_jwt_identity(), page=page, per_page=per_page
    )

    return success_response(
        data={
            'records': records,
            'pagination': {
                'page': page,
                'per_page': per_page,
                'total': total,
                'pages': (total + per_page - 1) // per_page
            }
        }
    )

@attendance_bp.route('/summary', methods=['GET'])
@jwt_required()
@student_required
def summary():
    """Overall attendance for the current student."""
    return success_response(data=StudentService.get_attendance_summary(get_jwt_identity()))
