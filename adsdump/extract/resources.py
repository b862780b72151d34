"""
Resource Fetchers - Extract Layer

Thin descriptors for every per-account resource that gets dumped.
Collections go through the Paginator, single objects are one request.
"""

import json
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import quote

from .graph_api import RequestExecutor
from .paginator import Paginator

COLLECTION_PAGE_SIZE = 100

ACCOUNT_FIELDS = (
    "id",
    "name",
    "account_id",
    "currency",
    "timezone_name",
    "business",
    "account_status",
)
CAMPAIGN_FIELDS = ("id", "name", "status", "objective", "created_time", "updated_time")
ADSET_FIELDS = (
    "id",
    "name",
    "status",
    "campaign_id",
    "daily_budget",
    "lifetime_budget",
    "created_time",
)
AD_FIELDS = ("id", "name", "status", "adset_id", "creative", "created_time")
INSIGHTS_FIELDS = ("impressions", "clicks", "spend", "ctr", "cpc", "date_start", "date_stop")


def build_envelope(items: List[Any]) -> bytes:
    """Wrap an accumulated batch the way single pages look, plus a count"""
    return json.dumps({"data": items, "summary": {"total_count": len(items)}}).encode(
        "utf-8"
    )


@dataclass(frozen=True)
class ResourceFetcher:
    """One dumpable resource of an ad account"""

    name: str
    endpoint_template: str
    fields: Tuple[str, ...]
    paginated: bool = True
    params: Dict[str, str] = field(default_factory=dict)

    def endpoint(self, account_id: str) -> str:
        return self.endpoint_template.format(account_id=quote(account_id, safe=""))

    def query_params(self) -> Dict[str, str]:
        query = {"fields": ",".join(self.fields)}
        query.update(self.params)
        return query

    def fetch(
        self, executor: RequestExecutor, paginator: Paginator, account_id: str
    ) -> bytes:
        """Fetch this resource for one account; raises FetchError on failure"""
        endpoint = self.endpoint(account_id)
        if not self.paginated:
            return executor.execute(endpoint, self.query_params())

        items = paginator.fetch_all(endpoint, self.name, params=self.query_params())
        return build_envelope(items)


def insights_params(since: Optional[date] = None, until: Optional[date] = None) -> Dict[str, str]:
    params = {"level": "account"}
    if since and until:
        params["time_range"] = json.dumps(
            {"since": since.isoformat(), "until": until.isoformat()}
        )
    else:
        params["date_preset"] = "last_30d"
    return params


def default_resources(
    since: Optional[date] = None, until: Optional[date] = None
) -> List[ResourceFetcher]:
    """
    Standard per-account resource set, in dump order

    Args:
        since: First day of the insights window
        until: Last day of the insights window (both or neither)

    Returns:
        List[ResourceFetcher]: ad_account, campaigns, adsets, ads, insights
    """
    page_size = {"limit": str(COLLECTION_PAGE_SIZE)}
    return [
        ResourceFetcher("ad_account", "{account_id}", ACCOUNT_FIELDS, paginated=False),
        ResourceFetcher("campaigns", "{account_id}/campaigns", CAMPAIGN_FIELDS, params=page_size),
        ResourceFetcher("adsets", "{account_id}/adsets", ADSET_FIELDS, params=page_size),
        ResourceFetcher("ads", "{account_id}/ads", AD_FIELDS, params=page_size),
        ResourceFetcher(
            "insights",
            "{account_id}/insights",
            INSIGHTS_FIELDS,
            paginated=False,
            params=insights_params(since, until),
        ),
    ]
