"""PagerDuty users API client with hook system.

Every request is wrapped by invoke_with_hooks. The client always records
Prometheus metrics and logs requests at debug level; callers can add their
own hooks, e.g. a LatencyTracker to report response times.
"""

import logging
import time
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from typing import Any, Self
from urllib.parse import quote

import requests
from prometheus_client import Counter, Histogram

from fintech_canary.domain.pagerduty import (
    PagedResponse,
    PagerDutyUser,
    PagerDutyUsersResponse,
)
from fintech_canary.utils.config import DEFAULT_PAGERDUTY_URL, DEFAULT_TIMEOUT
from fintech_canary.utils.exceptions import PagerDutyApiError
from fintech_canary.utils.hooks import Hooks, LatencyTracker, invoke_with_hooks

BASE_URL = DEFAULT_PAGERDUTY_URL
TIMEOUT = DEFAULT_TIMEOUT
MAX_PAGE_LIMIT = 100
ALL_USERS_PAGE_DELAY = 0.1

pagerduty_request = Counter(
    "fintech_canary_pagerduty_api_requests_total",
    "Total number of PagerDuty API requests",
    ["method", "verb"],
)

pagerduty_request_duration = Histogram(
    "fintech_canary_pagerduty_api_request_duration_seconds",
    "PagerDuty API request duration in seconds",
    ["method", "verb"],
)


@dataclass(frozen=True)
class PagerDutyApiCallContext:
    """Context passed to API call hooks.

    Attributes:
        method: API method name (e.g., "users.list")
        verb: HTTP verb (e.g., "GET")
    """

    method: str
    verb: str


def _metrics_hook(context: PagerDutyApiCallContext) -> None:
    pagerduty_request.labels(context.method, context.verb).inc()


def _request_log_hook(context: PagerDutyApiCallContext) -> None:
    logging.debug(f"PagerDuty API request {context.verb} {context.method}")


class _DurationHook:
    def __init__(self) -> None:
        self._tracker = LatencyTracker()

    def start(self, context: PagerDutyApiCallContext) -> None:
        self._tracker.start(context)

    def stop(self, context: PagerDutyApiCallContext) -> None:
        self._tracker.stop(context)
        pagerduty_request_duration.labels(context.method, context.verb).observe(
            self._tracker.last_seconds
        )


class PagerDutyUserService:
    """Retrieve PagerDuty users via the REST API.

    Example:
        >>> with PagerDutyUserService(token="...") as service:
        ...     page = service.get_users_page(offset=0, limit=10)
        ...     print(page.item_count(), page.has_more_pages())
    """

    def __init__(
        self,
        token: str,
        url: str = BASE_URL,
        timeout: int = TIMEOUT,
        pre_hooks: Sequence[Callable[[PagerDutyApiCallContext], None]] | None = None,
        post_hooks: Sequence[Callable[[PagerDutyApiCallContext], None]]
        | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Token token={token}",
            "Accept": "application/json",
        })
        duration = _DurationHook()
        self._hooks = Hooks(
            pre_hooks=[_metrics_hook, _request_log_hook, duration.start],
            post_hooks=[duration.stop],
        ).extend(pre_hooks=pre_hooks, post_hooks=post_hooks)

    def __enter__(self) -> Self:
        return self

    def __exit__(self, exc_type: Any, exc_value: Any, traceback: Any) -> None:
        self.cleanup()

    def cleanup(self) -> None:
        self.session.close()

    def _get(
        self, method: str, path: str, params: dict | None = None
    ) -> requests.Response:
        with invoke_with_hooks(
            PagerDutyApiCallContext(method=method, verb="GET"), self._hooks
        ):
            return self.session.get(
                f"{self.url.rstrip('/')}{path}", params=params, timeout=self.timeout
            )

    def get_user(self, user_id: str) -> PagerDutyUser:
        """Get a single user by ID.

        PagerDuty wraps the user in a "user" field.
        """
        response = self._get("users.get", f"/users/{quote(user_id, safe='')}")
        if response.status_code != 200:
            raise PagerDutyApiError("Failed to get user", response.status_code)
        return PagerDutyUser.model_validate(response.json()["user"])

    def get_users_page(self, offset: int, limit: int) -> PagedResponse[PagerDutyUser]:
        if limit <= 0 or limit > MAX_PAGE_LIMIT:
            raise ValueError(f"Limit must be between 1 and {MAX_PAGE_LIMIT}")

        response = self._get(
            "users.list", "/users", params={"offset": offset, "limit": limit}
        )
        if response.status_code != 200:
            raise PagerDutyApiError("Failed to get users", response.status_code)

        users_response = PagerDutyUsersResponse.model_validate(response.json())
        logging.debug(
            f"Fetched users page: {users_response.pagination_logging_info()}"
        )
        return users_response.to_paged_response()

    def iter_all_users(
        self,
        limit: int = MAX_PAGE_LIMIT,
        delay: float = ALL_USERS_PAGE_DELAY,
    ) -> Iterator[PagedResponse[PagerDutyUser]]:
        """Yield every page of users, sleeping `delay` seconds between pages."""
        offset = 0
        while True:
            page = self.get_users_page(offset, limit)
            yield page
            if not page.has_more_pages():
                return
            # a response without limit must not stall the offset
            offset = page.next_offset() if page.limit else offset + limit
            time.sleep(delay)
