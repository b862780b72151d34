"""
Cursor Paginator - Extract Layer

Follows the Graph API ``after`` cursor chain and accumulates every page's
records in arrival order.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from ..coreutils.errors import FetchError, ParseError
from .graph_api import RequestExecutor
from .schemas import PaginatedResponse

logger = logging.getLogger(__name__)


def parse_page(body: bytes, resource_name: str) -> PaginatedResponse:
    """Validate one collection page, raising ParseError on a foreign shape"""
    try:
        return PaginatedResponse.model_validate_json(body)
    except ValidationError as e:
        raise ParseError(
            f"Parsing paginated response for {resource_name}: "
            f"{e.error_count()} validation error(s), first: {e.errors()[0]['msg']}"
        ) from e


class Paginator:
    """Accumulates a Resource Batch across pages"""

    def __init__(self, executor: RequestExecutor, max_pages: int = 0):
        self.executor = executor
        self.max_pages = max_pages  # 0 = unlimited

    def fetch_all(
        self,
        endpoint: str,
        resource_name: str,
        params: Optional[Dict[str, Any]] = None,
        max_pages: Optional[int] = None,
    ) -> List[Any]:
        """
        Fetch every page of a collection endpoint

        Args:
            endpoint: Collection endpoint, e.g. 'act_1/campaigns'
            resource_name: Label used in log messages
            params: Base query parameters sent with every page
            max_pages: Page cap for this call; None uses the paginator default

        Returns:
            List: Records of all fetched pages, page 1 first

        Raises:
            FetchError: First failing page; ``partial_items`` carries the
                records accumulated before it
        """
        cap = self.max_pages if max_pages is None else max_pages
        all_items: List[Any] = []
        page_count = 0
        cursor = ""

        while True:
            page_count += 1

            if cap > 0 and page_count > cap:
                logger.info(f"Reached max pages limit ({cap}) for {resource_name}")
                break

            page_params = dict(params or {})
            if cursor:
                page_params["after"] = cursor

            if page_count > 1:
                logger.info(f"  Fetching page {page_count} for {resource_name}...")
            else:
                logger.info(f"Requesting: {endpoint} ({resource_name})")

            try:
                body = self.executor.execute(endpoint, page_params)
                page = parse_page(body, resource_name)
            except FetchError as e:
                e.partial_items = list(all_items)
                raise

            all_items.extend(page.data)

            if not page.after:
                if page_count > 1:
                    logger.info(
                        f"  Completed: fetched {len(all_items)} items across "
                        f"{page_count} pages for {resource_name}"
                    )
                break

            cursor = page.after

        return all_items
