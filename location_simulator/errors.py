"""
Location Simulator Errors

Author: Colin Bitterfield
Email: colin@bitterfield.com
Date Created: 2026-10-18
Date Updated: 2026-10-18
Version: 0.1.0

Error hierarchy shared by the codec, session, GPX reader and playback.
"""

from typing import Any, Dict, Optional


class SimLocationError(Exception):
    """Base class for all location simulation errors."""

    code = "SIMLOCATION_ERROR"

    def __init__(self, message: str, *, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_payload(self) -> Dict[str, Any]:
        payload = {
            'status': 'error',
            'error_code': self.code,
            'error': self.message,
        }
        if self.details:
            payload['details'] = self.details
        return payload

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(code={self.code}, msg={self.message})"


class ValidationError(SimLocationError, ValueError):
    """Empty or non-numeric coordinate, or unparseable timestamp"""
    code = "VALIDATION_ERROR"


class ServiceConnectionError(SimLocationError, ConnectionError):
    """Location service unreachable, or session used after close"""
    code = "CONNECTION_ERROR"


class EncodingError(SimLocationError):
    """Message could not be serialized"""
    code = "ENCODING_ERROR"


class TransportError(SimLocationError):
    """Message could not be written to the connection"""
    code = "TRANSPORT_ERROR"


class PlaybackCancelled(SimLocationError):
    """Playback stopped by its cancellation token"""
    code = "PLAYBACK_CANCELLED"
