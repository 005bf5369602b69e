"""Tally per-recipient outcomes into a broadcast report."""

from collections import Counter
from collections.abc import Iterable

from broadcast_shared.enums import DeliveryStatus

from broadcast_service.models import BroadcastReport, DeliveryOutcome


def aggregate(total: int, outcomes: Iterable[DeliveryOutcome]) -> BroadcastReport:
    """Count outcomes by status.

    Raises ValueError if the outcomes do not account for exactly *total*
    recipients, so a report never misstates its denominator.
    """
    counts = Counter(outcome.status for outcome in outcomes)

    report = BroadcastReport(
        total_recipients=total,
        sent_successfully=counts[DeliveryStatus.DELIVERED],
        failed=counts[DeliveryStatus.FAILED],
        no_subscription=counts[DeliveryStatus.NO_SUBSCRIPTION],
    )

    counted = report.sent_successfully + report.failed + report.no_subscription
    if counted != total or sum(counts.values()) != total:
        raise ValueError(
            f"Outcome count mismatch: expected {total}, "
            f"got {sum(counts.values())} ({counted} classified)"
        )
    return report
