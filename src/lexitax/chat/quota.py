"""
Guest query quota.

The server count is authoritative; queries submitted since the last sync
are counted locally on top of it so the limit applies before the server
has seen them.
"""

from dataclasses import dataclass

from lexitax.api.exceptions import GuestQuotaExceededError
from lexitax.api.schemas import GuestQueryCount
from lexitax.chat.constants import GUEST_QUERY_LIMIT
from lexitax.utils.logger import logger


@dataclass(frozen=True)
class QuotaDiscrepancy:
    """Local and server counts disagreed at reconciliation."""

    expected_used: int
    server_used: int


class GuestQuota:
    """Two-counter guest quota: server-observed usage plus local pending usage."""

    def __init__(self, limit: int = GUEST_QUERY_LIMIT):
        self.limit = limit
        self.server_used = 0
        self.local_pending = 0
        self.synced = False
        self.discrepancy: QuotaDiscrepancy | None = None

    @property
    def queries_used(self) -> int:
        return min(self.limit, self.server_used + self.local_pending)

    @property
    def queries_remaining(self) -> int:
        return self.limit - self.queries_used

    @property
    def exhausted(self) -> bool:
        return self.queries_used >= self.limit

    def check(self) -> None:
        """Raise GuestQuotaExceededError when no query is left."""
        if self.exhausted:
            raise GuestQuotaExceededError(self.limit)

    def consume(self) -> None:
        """Count one submitted guest query."""
        self.check()
        self.local_pending += 1
        logger.info(
            "Guest query consumed",
            queries_used=self.queries_used,
            queries_limit=self.limit,
        )

    def reconcile(self, count: GuestQueryCount) -> QuotaDiscrepancy | None:
        """
        Adopt the server's count and flag any mismatch with the local view.

        Args:
            count: Server-observed guest usage

        Returns:
            QuotaDiscrepancy | None: The mismatch, if the counts disagreed
        """
        expected = self.queries_used
        observed = min(self.limit, count.queries_used)
        # Before the first sync with no local usage there is nothing to compare
        if (self.synced or self.local_pending) and observed != expected:
            self.discrepancy = QuotaDiscrepancy(expected_used=expected, server_used=observed)
            logger.warning(
                "Guest quota out of sync with server",
                expected_used=expected,
                server_used=observed,
            )
        else:
            self.discrepancy = None

        self.server_used = observed
        self.local_pending = 0
        self.synced = True
        return self.discrepancy

    def reset(self) -> None:
        self.server_used = 0
        self.local_pending = 0
        self.synced = False
        self.discrepancy = None
