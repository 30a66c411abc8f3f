"""QR code payload validation service."""
import re
from typing import Tuple, Optional

class QRService:
    """Service for QR code operations."""
    
    # Canonical session identifier: 8-4-4-4-12 hex groups, any case
    SESSION_ID_PATTERN = re.compile(
        r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}',
        re.IGNORECASE
    )
    
    @staticmethod
    def validate_qr_code(qr_data: str) -> Tuple[bool, Optional[str], Optional[str]]:
        """
        Validate the decoded QR payload as a session identifier.
        Returns: (is_valid, session_id, error_message)
        
        The payload is returned unchanged; no trimming or case folding.
        """
        if not isinstance(qr_data, str):
            return False, None, "QR code payload must be text"
        
        if len(qr_data) != 36 or not QRService.SESSION_ID_PATTERN.fullmatch(qr_data):
            return False, None, "Invalid QR code format"
        
        return True, qr_data, None
