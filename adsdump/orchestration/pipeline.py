"""
Account Orchestrator

Discovers every ad account the token can read, then dumps each account's
resources one after another. A failing resource or account is logged and
recorded; only a failed discovery stops the run.

Success counting is strict: an account counts as successful only when every
one of its resource fetches succeeded.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from pydantic import ValidationError

from ..coreutils.config import Config
from ..coreutils.errors import DiscoveryError, FetchError
from ..extract.graph_api import RequestExecutor
from ..extract.paginator import Paginator
from ..extract.resources import ResourceFetcher, build_envelope, default_resources
from ..extract.schemas import AdAccount
from ..load.local_storage import OutputSink

logger = logging.getLogger(__name__)

ACCOUNTS_ENDPOINT = "me/adaccounts"
ACCOUNTS_FIELDS = ("id", "name", "account_id", "currency", "timezone_name", "account_status")


@dataclass
class AccountResult:
    """Outcome of one account's pass through all fetchers"""

    account: AdAccount
    fetched: List[str] = field(default_factory=list)
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def failed_resources(self) -> List[str]:
        return list(self.errors)

    @property
    def succeeded(self) -> bool:
        return not self.errors


@dataclass
class RunOutcome:
    """Tally for one run; advisory, never a gate"""

    accounts_discovered: int = 0
    accounts_processed: int = 0
    accounts_successful: int = 0
    results: List[AccountResult] = field(default_factory=list)

    @property
    def no_accounts(self) -> bool:
        return self.accounts_discovered == 0

    def record(self, result: AccountResult):
        self.results.append(result)
        self.accounts_processed += 1
        if result.succeeded:
            self.accounts_successful += 1

    def summary(self) -> Dict[str, int]:
        return {
            "accounts_discovered": self.accounts_discovered,
            "accounts_processed": self.accounts_processed,
            "accounts_successful": self.accounts_successful,
        }


class AccountOrchestrator:
    """Discovers accounts and dumps every configured resource for each"""

    def __init__(
        self,
        config: Config,
        executor: Optional[RequestExecutor] = None,
        paginator: Optional[Paginator] = None,
        sink: Optional[OutputSink] = None,
    ):
        """
        Initialize the orchestrator

        Args:
            config: Run configuration
            executor: Request executor (built from config if not provided)
            paginator: Paginator (built around the executor if not provided)
            sink: Output sink (console plus config.output_dir if not provided)
        """
        self.config = config
        self.executor = executor or RequestExecutor.from_config(config)
        self.paginator = paginator or Paginator(self.executor, max_pages=config.max_pages)
        self.sink = sink or OutputSink(output_dir=config.output_dir)

    def discover_accounts(self) -> List[AdAccount]:
        """
        Fetch all accounts accessible with the configured token

        Returns:
            List[AdAccount]: Accounts in upstream order

        Raises:
            DiscoveryError: The account list could not be fetched or parsed
        """
        logger.info("Discovering accessible ad accounts...")
        try:
            records = self.paginator.fetch_all(
                ACCOUNTS_ENDPOINT,
                "ad accounts",
                params={"fields": ",".join(ACCOUNTS_FIELDS)},
            )
        except FetchError as e:
            raise DiscoveryError(f"Failed to fetch ad accounts: {e}") from e

        try:
            accounts = [AdAccount.model_validate(record) for record in records]
        except ValidationError as e:
            raise DiscoveryError(f"Parsing ad accounts response: {e}") from e

        self.sink.emit("all_ad_accounts", build_envelope(records))
        return accounts

    def process_account(
        self, account: AdAccount, resources: Sequence[ResourceFetcher]
    ) -> AccountResult:
        """Run every fetcher for one account, isolating each failure"""
        result = AccountResult(account=account)

        logger.info("=" * 40)
        logger.info(f"Processing Account: {account.name} ({account.account_id})")
        logger.info("=" * 40)

        try:
            account_dir = self.sink.account_dir(account)
        except OSError as e:
            logger.error(f"❌ Error creating account directory for {account.name}: {e}")
            result.errors["account_dir"] = str(e)
            return result

        for resource in resources:
            try:
                body = resource.fetch(self.executor, self.paginator, account.id)
            except FetchError as e:
                logger.error(f"❌ Error fetching {resource.name}: {e}")
                if e.partial_items:
                    logger.info(
                        f"   Discarded {len(e.partial_items)} partial {resource.name} records"
                    )
                result.errors[resource.name] = str(e)
                continue

            self.sink.emit(resource.name, body, account_dir)
            result.fetched.append(resource.name)

        return result

    def run(self, resources: Optional[Sequence[ResourceFetcher]] = None) -> RunOutcome:
        """
        Discover accounts and dump every resource for each

        Args:
            resources: Fetchers to run per account; defaults to the standard set

        Returns:
            RunOutcome: Discovered / processed / successful tally

        Raises:
            DiscoveryError: Accounts could not be enumerated
        """
        if resources is None:
            resources = default_resources(
                self.config.insights_since, self.config.insights_until
            )

        logger.info("🚀 Starting Meta Ads API data dump...")
        if self.config.max_pages > 0:
            logger.info(f"Pagination limit: {self.config.max_pages} pages per endpoint")
        else:
            logger.info("Pagination: unlimited (will fetch all pages)")

        accounts = self.discover_accounts()
        outcome = RunOutcome(accounts_discovered=len(accounts))

        if not accounts:
            logger.warning("No ad accounts found for this access token.")
            return outcome

        logger.info(f"Found {len(accounts)} accessible ad account(s)")

        for i, account in enumerate(accounts, 1):
            logger.info(f"Processing {i}/{len(accounts)}: {account.name}")
            result = self.process_account(account, resources)
            if result.succeeded:
                logger.info(f"✅ {account.name}: all {len(result.fetched)} resources fetched")
            else:
                logger.warning(
                    f"⚠️  {account.name}: failed resources: {', '.join(result.failed_resources)}"
                )
            outcome.record(result)

        logger.info("=" * 40)
        logger.info("Data dump complete!")
        logger.info(
            f"Successfully processed {outcome.accounts_successful}/"
            f"{outcome.accounts_processed} accounts"
        )
        logger.info("=" * 40)
        return outcome
