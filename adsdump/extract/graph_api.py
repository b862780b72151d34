"""
Graph API Request Executor - Pure I/O Operations

Issues one authenticated GET against the Graph API, classifies the outcome
and retries throttled requests with exponential backoff.
Returns raw response bytes; interpretation is left to the caller.
"""

import logging
import time
from typing import Any, Callable, Dict, Optional

import requests
from pydantic import ValidationError

from ..coreutils.config import (
    DEFAULT_API_VERSION,
    DEFAULT_BACKOFF_BASE,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    Config,
)
from ..coreutils.errors import APIError, RateLimitExceededError, TransportError
from ..coreutils.request import masked_url, new_session, redact
from .schemas import ErrorEnvelope

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS_CODES = {429}

# Graph API throttling codes: app (4), user (17), page (32), call-rate (613)
RATE_LIMIT_ERROR_CODES = {4, 17, 32, 613}


def parse_error_envelope(body: bytes) -> Optional[ErrorEnvelope]:
    """Parse a ``{"error": {...}}`` body, or None when it has another shape"""
    try:
        return ErrorEnvelope.model_validate_json(body)
    except ValidationError:
        return None


class RequestExecutor:
    """Authenticated GET with rate-limit retries"""

    def __init__(
        self,
        access_token: str,
        base_url: str = DEFAULT_BASE_URL,
        api_version: str = DEFAULT_API_VERSION,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        backoff_base: float = DEFAULT_BACKOFF_BASE,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.access_token = access_token
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version.strip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.backoff_base = backoff_base
        self.session = session or new_session()
        self.sleep = sleep

    @classmethod
    def from_config(cls, config: Config, **kwargs) -> "RequestExecutor":
        return cls(
            access_token=config.access_token,
            base_url=config.base_url,
            api_version=config.api_version,
            timeout=config.timeout,
            max_retries=config.max_retries,
            backoff_base=config.backoff_base,
            **kwargs,
        )

    def build_url(self, endpoint: str) -> str:
        return f"{self.base_url}/{self.api_version}/{endpoint.lstrip('/')}"

    def backoff_delay(self, attempt: int) -> float:
        """Delay before retry ``attempt`` (0-based): 1, 2, 4, ... base units"""
        return self.backoff_base * (2**attempt)

    def execute(self, endpoint: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """
        Fetch one endpoint and return the raw body

        Args:
            endpoint: Path relative to the versioned base URL, e.g. 'act_1/campaigns'
            params: Query parameters; the access token is added here

        Returns:
            bytes: Response body of a 200 response, verbatim

        Raises:
            TransportError: Connection, timeout or malformed URL
            RateLimitExceededError: Still throttled after max_retries retries
            APIError: Any other non-success status
        """
        url = self.build_url(endpoint)
        query = dict(params or {})
        query["access_token"] = self.access_token

        attempt = 0
        while True:
            if logger.isEnabledFor(logging.DEBUG):
                logger.debug(f"Request URL: {masked_url(url, query)}")
                if attempt > 0:
                    logger.debug(f"Retry attempt: {attempt}")

            try:
                response = self.session.get(url, params=query, timeout=self.timeout)
            except requests.exceptions.RequestException as e:
                # requests exception text embeds the tokenized URL
                raise TransportError(
                    f"Request to {endpoint} failed: {redact(str(e), self.access_token)}"
                ) from None

            logger.debug(f"Response status: {response.status_code} {response.reason}")

            if response.status_code == 200:
                return response.content

            body = response.content
            envelope = parse_error_envelope(body)

            if self._is_rate_limited(response.status_code, envelope):
                if attempt < self.max_retries:
                    wait_time = self.backoff_delay(attempt)
                    logger.warning(
                        f"Rate limit hit on {endpoint}, waiting {wait_time:g}s before retry..."
                    )
                    self.sleep(wait_time)
                    attempt += 1
                    continue
                raise RateLimitExceededError(
                    f"Rate limit exceeded after {attempt} retries for {endpoint}",
                    retries=attempt,
                )

            if envelope is not None:
                raise APIError(
                    response.status_code,
                    envelope.error.message,
                    error_type=envelope.error.type,
                    code=envelope.error.code,
                    body=body,
                )
            raise APIError(
                response.status_code,
                body.decode("utf-8", errors="replace"),
                body=body,
            )

    @staticmethod
    def _is_rate_limited(status_code: int, envelope: Optional[ErrorEnvelope]) -> bool:
        if status_code in RATE_LIMIT_STATUS_CODES:
            return True
        return envelope is not None and envelope.error.code in RATE_LIMIT_ERROR_CODES
