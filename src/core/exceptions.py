from typing import Any, Dict, Optional

class BandwidthError(Exception):
    """Base exception class for all client exceptions"""
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

class ConfigError(BandwidthError):
    """Raised when there is a configuration error"""
    pass

class LoggerError(BandwidthError):
    """Raised when there is a logging error"""
    pass

class InvalidArgumentError(BandwidthError, ValueError):
    """Raised when a required argument is empty or missing"""
    pass

class HttpFailureError(BandwidthError):
    """Raised when the API answers with a non-2xx status; body holds the raw response bytes"""
    def __init__(self, status_code: int, body: bytes = b"", details: Optional[Dict[str, Any]] = None):
        self.status_code = status_code
        self.body = bytes(body)
        super().__init__(f"HTTP {status_code}: {self.text}" if self.body else f"HTTP {status_code}", details)

    @property
    def text(self) -> str:
        """Body decoded for display; undecodable bytes are replaced"""
        return self.body.decode("utf-8", errors="replace")

class DecodeError(BandwidthError):
    """Raised when a response body cannot be decoded into the declared type"""
    pass

class ProtocolError(BandwidthError):
    """Raised when a response violates the API contract"""
    pass

class TransportError(BandwidthError):
    """Raised when the connection fails before a response is received"""
    pass

class RequestCancelledError(BandwidthError):
    """Raised when a request is cancelled through its cancellation token"""
    pass
