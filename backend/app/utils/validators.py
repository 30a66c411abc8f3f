"""Validation utilities for request payloads."""
import math
from typing import Any, Optional

class Validator:
    """Validation helper class."""
    
    @staticmethod
    def parse_coordinate(value: Any, limit: float) -> Optional[float]:
        """Return ``value`` as a finite float within ``[-limit, limit]``, else None."""
        if isinstance(value, bool):
            return None
        try:
            number = float(value)
        except (TypeError, ValueError):
            return None
        if not math.isfinite(number) or abs(number) > limit:
            return None
        return number
    
    @staticmethod
    def parse_positive_int(value: Any, default: int, maximum: int) -> int:
        """Parse pagination-style integers, clamped to ``[1, maximum]``."""
        try:
            number = int(value)
        except (TypeError, ValueError):
            return default
        return max(1, min(number, maximum))
