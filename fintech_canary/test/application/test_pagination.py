from unittest.mock import create_autospec

import pytest

from fintech_canary.application.pagerduty_user_service import PagerDutyUserService
from fintech_canary.application.pagination import UserPageNavigator
from fintech_canary.domain.pagerduty import PagedResponse, PagerDutyUser


def _page(offset: int, limit: int, more: bool) -> PagedResponse[PagerDutyUser]:
    return PagedResponse[PagerDutyUser](
        limit=limit,
        offset=offset,
        more=more,
        total=None,
        data=[PagerDutyUser(id=f"P{offset}", type="user")],
    )


@pytest.fixture
def service() -> PagerDutyUserService:
    service = create_autospec(PagerDutyUserService, instance=True)
    service.get_users_page.side_effect = lambda offset, limit: _page(
        offset, limit, more=offset < 40
    )
    return service


@pytest.fixture
def navigator(service: PagerDutyUserService) -> UserPageNavigator:
    return UserPageNavigator(service, page_size=10)


def test_initial_state(navigator: UserPageNavigator) -> None:
    assert not navigator.is_loaded
    assert navigator.current_offset == 0
    assert navigator.current_page_number == 1
    assert not navigator.has_next_page()
    assert not navigator.has_previous_page()


def test_load(navigator: UserPageNavigator, service: PagerDutyUserService) -> None:
    page = navigator.load()
    assert navigator.is_loaded
    assert navigator.current_page == page
    service.get_users_page.assert_called_once_with(0, 10)  # type: ignore[attr-defined]


def test_next_and_previous(navigator: UserPageNavigator) -> None:
    navigator.load()
    assert navigator.next_page()
    assert navigator.current_offset == 10
    assert navigator.current_page_number == 2
    assert navigator.previous_page()
    assert navigator.current_offset == 0
    assert not navigator.previous_page()


def test_next_page_needs_loaded_page(
    navigator: UserPageNavigator, service: PagerDutyUserService
) -> None:
    assert not navigator.next_page()
    service.get_users_page.assert_not_called()  # type: ignore[attr-defined]


def test_next_page_stops_on_last_page(navigator: UserPageNavigator) -> None:
    navigator.load(40)
    assert not navigator.has_next_page()
    assert not navigator.next_page()
    assert navigator.current_offset == 40


def test_jump_to_page(navigator: UserPageNavigator) -> None:
    navigator.jump_to_page(3)
    assert navigator.current_offset == 20
    assert navigator.current_page_number == 3


@pytest.mark.parametrize("page_number", [0, -2])
def test_jump_to_invalid_page(
    navigator: UserPageNavigator, service: PagerDutyUserService, page_number: int
) -> None:
    with pytest.raises(ValueError, match="Page number must be positive"):
        navigator.jump_to_page(page_number)
    service.get_users_page.assert_not_called()  # type: ignore[attr-defined]


def test_change_page_size_resets_offset(navigator: UserPageNavigator) -> None:
    navigator.jump_to_page(3)
    navigator.change_page_size(25)
    assert navigator.page_size == 25
    assert navigator.current_offset == 0
    assert navigator.current_page_number == 1


@pytest.mark.parametrize("page_size", [0, 101])
def test_change_page_size_invalid(navigator: UserPageNavigator, page_size: int) -> None:
    with pytest.raises(ValueError, match="Page size must be between 1 and 100"):
        navigator.change_page_size(page_size)
    assert navigator.page_size == 10


def test_previous_page_does_not_go_below_zero(navigator: UserPageNavigator) -> None:
    navigator.load(5)
    assert navigator.previous_page()
    assert navigator.current_offset == 0
