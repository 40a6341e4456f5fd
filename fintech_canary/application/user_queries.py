from collections import Counter
from collections.abc import Iterable

from fintech_canary.domain.pagerduty import PagerDutyUser
from fintech_canary.utils.hooks import LatencyTracker


def search_users(users: Iterable[PagerDutyUser], term: str) -> list[PagerDutyUser]:
    """Case-insensitive substring search on user name and email."""
    term = term.strip().lower()
    if not term:
        raise ValueError("Search term cannot be empty")
    return [
        u
        for u in users
        if (u.name and term in u.name.lower()) or (u.email and term in u.email.lower())
    ]


def count_invited(users: Iterable[PagerDutyUser]) -> int:
    # unknown invitation status counts as invited
    return sum(1 for u in users if u.invitation_sent is not False)


class UserStatistics:
    """Session statistics of the user explorer."""

    def __init__(self, latency: LatencyTracker | None = None) -> None:
        self.latency = latency or LatencyTracker()
        self.time_zones: Counter[str] = Counter()
        self.roles: Counter[str] = Counter()

    @property
    def api_calls(self) -> int:
        return self.latency.calls

    @property
    def average_response_ms(self) -> int:
        return int(self.latency.average_seconds * 1000)

    def update(self, users: Iterable[PagerDutyUser]) -> None:
        for user in users:
            if user.time_zone is not None:
                self.time_zones[user.time_zone] += 1
            if user.role is not None:
                self.roles[user.role] += 1

    def top_time_zones(self, limit: int = 10) -> list[tuple[str, int]]:
        return self.time_zones.most_common(limit)

    def roles_by_count(self) -> list[tuple[str, int]]:
        return self.roles.most_common()
