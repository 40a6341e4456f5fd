from fintech_canary.application.pagerduty_user_service import (
    MAX_PAGE_LIMIT,
    PagerDutyUserService,
)
from fintech_canary.domain.pagerduty import PagedResponse, PagerDutyUser
from fintech_canary.utils.config import DEFAULT_PAGE_SIZE


class UserPageNavigator:
    """Offset based paging state for browsing PagerDuty users."""

    def __init__(
        self, service: PagerDutyUserService, page_size: int = DEFAULT_PAGE_SIZE
    ) -> None:
        self.service = service
        self.page_size = page_size
        self.current_offset = 0
        self.current_page: PagedResponse[PagerDutyUser] | None = None

    @property
    def current_page_number(self) -> int:
        return self.current_offset // self.page_size + 1

    @property
    def is_loaded(self) -> bool:
        return self.current_page is not None

    def has_next_page(self) -> bool:
        return self.current_page is not None and self.current_page.has_more_pages()

    def has_previous_page(self) -> bool:
        return self.current_offset > 0

    def load(self, offset: int | None = None) -> PagedResponse[PagerDutyUser]:
        if offset is not None:
            self.current_offset = offset
        self.current_page = self.service.get_users_page(
            self.current_offset, self.page_size
        )
        return self.current_page

    def next_page(self) -> bool:
        if not self.has_next_page():
            return False
        assert self.current_page
        self.load(self.current_page.next_offset())
        return True

    def previous_page(self) -> bool:
        if not self.has_previous_page():
            return False
        self.load(max(0, self.current_offset - self.page_size))
        return True

    def jump_to_page(self, page_number: int) -> None:
        if page_number < 1:
            raise ValueError("Page number must be positive")
        self.load((page_number - 1) * self.page_size)

    def change_page_size(self, page_size: int) -> None:
        if not 1 <= page_size <= MAX_PAGE_LIMIT:
            raise ValueError(f"Page size must be between 1 and {MAX_PAGE_LIMIT}")
        self.page_size = page_size
        self.load(0)
