from urllib.parse import quote_plus, urlencode
from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter
from typing import Any, Dict, Optional

from .config import mask_token

# Transport-level retries are disabled: connection failures surface at once
# and rate limits are retried by the caller, which owns the backoff policy.
NO_RETRY_STRATEGY = Retry(
    total=None,
    connect=0,
    read=0,
    status=0,
    other=0,
    redirect=5,
    raise_on_status=False,
)


def new_session() -> requests.Session:
    """Create a new requests session with transport retries disabled"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=NO_RETRY_STRATEGY)
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update(
        {"User-Agent": "adsdump/1.0", "Accept": "application/json"}
    )

    return session


def masked_url(
    url: str, params: Optional[Dict[str, Any]] = None, secret_key: str = "access_token"
) -> str:
    """Render ``url`` with its query string, masking the ``secret_key`` value"""
    if not params:
        return url
    shown = dict(params)
    if shown.get(secret_key):
        shown[secret_key] = mask_token(str(shown[secret_key]))
    return f"{url}?{urlencode(shown)}"


def redact(text: str, secret: str) -> str:
    """Replace every occurrence of ``secret`` in ``text`` with its masked form"""
    if not secret:
        return text
    masked = mask_token(secret)
    # requests quotes the token inside URLs in exception messages
    for variant in {secret, quote_plus(secret)}:
        text = text.replace(variant, masked)
    return text
