"""
Error taxonomy

Every failure that crosses a layer boundary is one of these classes, so the
orchestrator can decide what to isolate and what to let through.
"""

from typing import Any, List, Optional


class AdsDumpError(Exception):
    """Base class for all adsdump errors"""


class ConfigError(AdsDumpError):
    """Invalid or missing configuration"""


class FetchError(AdsDumpError):
    """A single logical fetch failed.

    ``partial_items`` holds whatever the paginator accumulated before the
    failure; it stays empty for single-object fetches.
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.partial_items: List[Any] = []


class TransportError(FetchError):
    """Connection, DNS, timeout or malformed request - never retried"""


class RateLimitExceededError(FetchError):
    """Upstream kept throttling after every allowed retry"""

    def __init__(self, message: str, retries: int):
        super().__init__(message)
        self.retries = retries


class APIError(FetchError):
    """Non-success HTTP status that is not a rate limit"""

    def __init__(
        self,
        status_code: int,
        message: str,
        error_type: Optional[str] = None,
        code: Optional[int] = None,
        body: bytes = b"",
    ):
        if error_type is not None or code is not None:
            text = (
                f"API error (status {status_code}): {message} "
                f"[Code: {code}, Type: {error_type}]"
            )
        else:
            text = f"API error (status {status_code}): {message}"
        super().__init__(text)
        self.status_code = status_code
        self.message = message
        self.error_type = error_type
        self.code = code
        self.body = body


class ParseError(FetchError):
    """Response body does not match the expected JSON shape"""


class DiscoveryError(AdsDumpError):
    """Accessible accounts could not be enumerated; nothing to iterate"""
