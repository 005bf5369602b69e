"""Audience resolution: named audience -> concrete recipient ids."""

import datetime
from collections.abc import Iterable, Sequence
from typing import assert_never

from broadcast_shared.enums import AudienceKind, PlanType

from broadcast_service.errors import InvalidAudienceError
from broadcast_service.models import AudienceStats, Recipient

INACTIVITY_WINDOW = datetime.timedelta(hours=24)


def parse_audience(value: object) -> AudienceKind:
    """Convert a raw audience name to AudienceKind.

    Raises InvalidAudienceError for anything that is not a known member;
    there is no fallback audience.
    """
    if isinstance(value, AudienceKind):
        return value
    if isinstance(value, str):
        try:
            return AudienceKind(value)
        except ValueError:
            pass
    raise InvalidAudienceError(value)


def resolve(
    audience: AudienceKind,
    recipients: Iterable[Recipient],
    now: datetime.datetime,
) -> list[str]:
    """Return the ids of recipients selected by *audience*.

    Pure function of its inputs: *now* is the single clock reading used
    for every recipient. Subscription state is not considered here.
    Empty ids are skipped and duplicates collapsed, keeping the order
    of first appearance.
    """
    if not isinstance(audience, AudienceKind):
        raise InvalidAudienceError(audience)

    selected = (
        r.id for r in recipients if r.id and _matches(audience, r, now)
    )
    return list(dict.fromkeys(selected))


def _matches(
    audience: AudienceKind, recipient: Recipient, now: datetime.datetime
) -> bool:
    match audience:
        case AudienceKind.ALL:
            return True
        case AudienceKind.INACTIVE_24H:
            return _is_inactive(recipient, now)
        case AudienceKind.ENROLLED:
            return recipient.is_enrolled
        case AudienceKind.FREE_USERS:
            return recipient.plan_type == PlanType.FREE
        case _:
            assert_never(audience)


def _is_inactive(recipient: Recipient, now: datetime.datetime) -> bool:
    # Never-seen recipients count as inactive.
    if recipient.last_active_at is None:
        return True
    return now - recipient.last_active_at > INACTIVITY_WINDOW


def audience_stats(
    recipients: Sequence[Recipient],
    active_ids: set[str],
    now: datetime.datetime,
) -> dict[AudienceKind, AudienceStats]:
    """Per-audience recipient count and how many of them are reachable."""
    stats: dict[AudienceKind, AudienceStats] = {}
    for kind in AudienceKind:
        ids = resolve(kind, recipients, now)
        stats[kind] = AudienceStats(
            total=len(ids),
            with_push=sum(1 for rid in ids if rid in active_ids),
        )
    return stats
