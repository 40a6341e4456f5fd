import logging

import click

from fintech_canary.application.pagerduty_user_service import PagerDutyUserService
from fintech_canary.application.user_queries import count_invited
from fintech_canary.domain.pagerduty import PagerDutyUser
from fintech_canary.utils.exceptions import PagerDutyApiError

FULL_PAGINATION_PAGE_SIZE = 25


class PagingUserCanary:
    """Exercise the PagerDuty users API: one page, all pages, one user."""

    def __init__(self, service: PagerDutyUserService) -> None:
        self.service = service

    def demonstrate_single_page(self, limit: int = 10) -> None:
        click.echo("=== Fetching Single Page of Users ===")
        page = self.service.get_users_page(0, limit)

        click.echo(f"Retrieved {page.item_count()} users")
        click.echo(f"Has more pages: {page.has_more_pages()}")
        click.echo(f"Total users: {page.total}")

        click.echo("\nFirst few users:")
        for user in page.data[:3]:
            click.echo(f"  - {user.name} ({user.email})")

    def demonstrate_full_pagination(
        self, page_size: int = FULL_PAGINATION_PAGE_SIZE
    ) -> list[PagerDutyUser]:
        click.echo("\n=== Fetching All Users with Pagination ===")
        all_users: list[PagerDutyUser] = []
        for page_number, page in enumerate(
            self.service.iter_all_users(limit=page_size), start=1
        ):
            click.echo(f"Fetching page {page_number} (offset={page.offset})...")
            all_users.extend(page.data)
            click.echo(
                f"  Retrieved {page.item_count()} users "
                f"(total so far: {len(all_users)})"
            )

        click.echo(f"\nTotal users retrieved: {len(all_users)}")
        click.echo(f"Active users (invitation sent): {count_invited(all_users)}")
        return all_users

    def demonstrate_single_user(self, user_id: str) -> PagerDutyUser:
        click.echo(f"\n=== Fetching User: {user_id} ===")
        user = self.service.get_user(user_id)

        click.echo(f"Name: {user.name}")
        click.echo(f"Email: {user.email}")
        click.echo(f"Role: {user.role}")
        click.echo(f"Time Zone: {user.time_zone}")
        click.echo(f"Job Title: {user.job_title}")
        if user.has_unknown_fields():
            click.echo(f"Unknown fields detected: {user.unknown_fields}")
        return user

    def run_demo(
        self, full_pagination: bool = False, user_id: str | None = None
    ) -> None:
        try:
            self.demonstrate_single_page()
            if full_pagination:
                self.demonstrate_full_pagination()
            if user_id:
                self.demonstrate_single_user(user_id)
        except PagerDutyApiError as e:
            logging.error(f"API Error: {e}")
            raise
