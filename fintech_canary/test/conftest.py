import time
from collections.abc import Generator
from typing import Any

import pytest
from pytest_httpserver import HTTPServer

from fintech_canary.application.pagerduty_user_service import PagerDutyUserService
from fintech_canary.test.fixtures import TOKEN, Fixtures
from fintech_canary.utils import config
from fintech_canary.utils.config import PAGERDUTY_API_URL
from fintech_canary.utils.environ import PAGERDUTY_API_TOKEN
from fintech_canary.utils.environment import CANARY_CONFIG, CANARY_LOG_LEVEL
from fintech_canary.utils.hooks import LatencyTracker


fxt = Fixtures("pagerduty")


@pytest.fixture
def patch_sleep(mocker):
    yield mocker.patch.object(time, "sleep")


@pytest.fixture(autouse=True)
def reset_config() -> Generator[None, None, None]:
    config.init({})
    yield
    config.init({})


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    # setenv first so the variables are removed again on teardown
    for name in (
        CANARY_CONFIG,
        CANARY_LOG_LEVEL,
        PAGERDUTY_API_URL,
        PAGERDUTY_API_TOKEN,
    ):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)


@pytest.fixture
def users_page_1() -> dict[str, Any]:
    return fxt.get_json("users_page_1.json")


@pytest.fixture
def users_page_2() -> dict[str, Any]:
    return fxt.get_json("users_page_2.json")


@pytest.fixture
def user_payload() -> dict[str, Any]:
    return fxt.get_json("user.json")


@pytest.fixture
def latency() -> LatencyTracker:
    return LatencyTracker()


@pytest.fixture
def pagerduty_service(
    httpserver: HTTPServer, latency: LatencyTracker
) -> Generator[PagerDutyUserService, None, None]:
    service = PagerDutyUserService(
        token=TOKEN,
        url=httpserver.url_for("/"),
        pre_hooks=[latency.start],
        post_hooks=[latency.stop],
    )
    yield service
    service.cleanup()


@pytest.fixture
def serve_all_users(
    httpserver: HTTPServer,
    users_page_1: dict[str, Any],
    users_page_2: dict[str, Any],
) -> HTTPServer:
    """Serve both user fixture pages for a full listing with limit=100."""
    httpserver.expect_request(
        "/users", query_string={"offset": "0", "limit": "100"}
    ).respond_with_json(users_page_1)
    httpserver.expect_request(
        "/users", query_string={"offset": "3", "limit": "100"}
    ).respond_with_json(users_page_2)
    return httpserver
