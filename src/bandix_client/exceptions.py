"""Custom exceptions for the Bandix client."""

class BandixError(Exception):
    """Base exception for Bandix operations."""
    pass

class ConnectionError(BandixError):
    """Connection to the router failed or timed out."""
    pass

class APIError(BandixError):
    """API request failed."""
    def __init__(self, message: str, status_code: int = None, response_text: str = None):
        super().__init__(message)
        self.status_code = status_code
        self.response_text = response_text

class PayloadError(BandixError):
    """Response body could not be decoded into the expected shape."""
    pass

class ConfigurationError(BandixError):
    """Configuration is invalid."""
    pass

class LimitError(BandixError):
    """Speed limit request is invalid for the current editor state."""
    pass
