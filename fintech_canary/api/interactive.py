"""Interactive PagerDuty user explorer.

Reads menu choices line by line from a text stream (stdin by default) and
renders through a rich console. End of input at any prompt ends the session
the same way as choosing "q".
"""

import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import TextIO

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from fintech_canary.application.export import (
    EXPORT_FORMATS,
    export_filename,
    export_users,
)
from fintech_canary.application.pagerduty_user_service import (
    MAX_PAGE_LIMIT,
    PagerDutyUserService,
)
from fintech_canary.application.pagination import UserPageNavigator
from fintech_canary.application.user_queries import UserStatistics, search_users
from fintech_canary.domain.pagerduty import PagerDutyUser
from fintech_canary.utils.config import DEFAULT_PAGE_SIZE
from fintech_canary.utils.exceptions import PagerDutyApiError

RATE_LIMIT_WAIT_SECONDS = 30
PREVIEW_SIZE = 3
QUIT_CHOICES = {"q", "quit", "exit"}


class EndOfInput(EOFError):
    pass


class InteractiveExplorer:
    def __init__(
        self,
        service: PagerDutyUserService,
        statistics: UserStatistics | None = None,
        stdin: TextIO | None = None,
        console: Console | None = None,
        page_size: int = DEFAULT_PAGE_SIZE,
        export_dir: Path | None = None,
    ) -> None:
        self.service = service
        self.navigator = UserPageNavigator(service, page_size=page_size)
        self.statistics = statistics or UserStatistics()
        self.stdin = stdin or sys.stdin
        self.console = console or Console()
        self.export_dir = export_dir or Path.cwd()
        self.loaded_users: list[PagerDutyUser] = []
        self._actions: dict[str, Callable[[], None]] = {
            "1": self.view_current_page,
            "2": self.next_page,
            "3": self.previous_page,
            "4": self.jump_to_page,
            "5": self.change_page_size,
            "6": self.search_user,
            "7": self.load_all_users,
            "8": self.show_statistics,
            "9": self.export_data,
        }

    def run(self) -> None:
        self.print_welcome()
        try:
            while True:
                if not self.navigator.is_loaded:
                    self._guarded(self._load_page)
                self.print_menu()
                choice = self._read("\nChoice: ").strip().lower()
                if choice in QUIT_CHOICES:
                    break
                action = self._actions.get(choice)
                if action is None:
                    self.print_error("Invalid choice. Please try again.")
                else:
                    self._guarded(action)
                self.console.print("\nPress Enter to continue...")
                self._read()
        except EndOfInput:
            pass
        self.print_goodbye()

    def _read(self, prompt: str = "") -> str:
        if prompt:
            self.console.print(prompt, end="", markup=False)
        line = self.stdin.readline()
        if not line:
            raise EndOfInput
        return line.rstrip("\r\n")

    def _guarded(self, action: Callable[[], None]) -> None:
        try:
            action()
        except EndOfInput:
            raise
        except PagerDutyApiError as e:
            self.print_error(f"Error: {e}")
            if e.is_rate_limited:
                self.print_warning(
                    f"Rate limit hit! Waiting {RATE_LIMIT_WAIT_SECONDS} seconds..."
                )
                time.sleep(RATE_LIMIT_WAIT_SECONDS)
        except Exception as e:
            self.print_error(f"Error: {e}")

    def _load_page(self) -> None:
        self.navigator.load()
        self._print_latency()

    def _print_latency(self) -> None:
        took_ms = int(self.statistics.latency.last_seconds * 1000)
        self.console.print(
            f"  [API call took {took_ms} ms]", style="cyan", markup=False
        )

    def print_welcome(self) -> None:
        self.console.clear()
        self.console.rule("[b blue]PagerDuty User Explorer - Interactive Canary")
        self.console.print("Loading initial data...\n")

    def print_menu(self) -> None:
        self.console.clear()
        nav = self.navigator
        page = nav.current_page
        self.console.print("[b cyan]═══ PagerDuty User Explorer ═══")
        if page is None:
            self.console.print(f"Page {nav.current_page_number} | not loaded")
        else:
            total = page.total if page.total is not None else "?"
            self.console.print(
                f"Page {nav.current_page_number} | Showing "
                f"{nav.current_offset + 1}-{nav.current_offset + page.item_count()} "
                f"of {total} users"
            )
        self.console.print("─" * 50)

        if page is not None and not page.is_empty():
            self.console.print("[yellow]Current page preview:")
            for user in page.data[:PREVIEW_SIZE]:
                self.console.print(
                    f"  • {escape(user.name or 'Unknown')} "
                    f"({escape(user.email or 'No email')})"
                )
            if page.item_count() > PREVIEW_SIZE:
                self.console.print(
                    f"  ... and {page.item_count() - PREVIEW_SIZE} more"
                )

        self.console.print("\n[b]Options:")
        self.console.print("  1. View current page (detailed)")
        self.console.print("  2. Next page →")
        self.console.print("  3. Previous page ←")
        self.console.print("  4. Jump to page")
        self.console.print(f"  5. Change page size (current: {nav.page_size})")
        self.console.print("  6. Search for user")
        self.console.print("  7. Load all users")
        self.console.print("  8. Show statistics")
        self.console.print("  9. Export data")
        self.console.print("  Q. Quit")

    def view_current_page(self) -> None:
        page = self.navigator.current_page
        if page is None or page.is_empty():
            self.print_warning("No users on current page")
            return

        self.console.clear()
        page_number = self.navigator.current_page_number
        self.console.print(f"[b green]═══ Page {page_number} - Detailed View ═══\n")
        for index, user in enumerate(page.data, start=1):
            self.print_user_detailed(index, user)
            self.console.print("─" * 70)
        self.print_page_navigation()

    def print_user_detailed(self, index: int, user: PagerDutyUser) -> None:
        name = escape(user.name or "Unknown User")
        self.console.print(f"[b]{index}. {name}[/] (ID: {escape(user.id)})")
        self.console.print(f"   Email: {escape(user.email or 'N/A')}")
        self.console.print(
            f"   Role: {escape(user.role or 'N/A')} | Type: {escape(user.type)}"
        )
        if user.job_title is not None:
            self.console.print(f"   Job Title: {escape(user.job_title)}")
        if user.time_zone is not None:
            self.console.print(f"   Time Zone: {escape(user.time_zone)}")
        if user.invitation_sent is not None:
            status = "Active" if user.invitation_sent else "Invitation Pending"
            self.console.print(f"   Status: {status}")
        if user.has_unknown_fields():
            fields = ", ".join(sorted(user.unknown_fields))
            self.console.print(f"   [yellow]Unknown fields: {escape(fields)}")

    def print_page_navigation(self) -> None:
        parts = []
        if self.navigator.has_previous_page():
            parts.append("[← Previous]")
        parts.append(f"Page {self.navigator.current_page_number}")
        if self.navigator.has_next_page():
            parts.append("[Next →]")
        self.console.print("\n" + " ".join(parts), style="cyan", markup=False)

    def next_page(self) -> None:
        if not self.navigator.next_page():
            self.print_warning("Already on last page")
            return
        self._print_latency()
        self.print_success(f"Moved to page {self.navigator.current_page_number}")

    def previous_page(self) -> None:
        if not self.navigator.previous_page():
            self.print_warning("Already on first page")
            return
        self._print_latency()
        self.print_success(f"Moved to page {self.navigator.current_page_number}")

    def jump_to_page(self) -> None:
        raw = self._read("Enter page number: ").strip()
        try:
            page_number = int(raw)
        except ValueError:
            self.print_error("Invalid page number")
            return
        try:
            self.navigator.jump_to_page(page_number)
        except ValueError as e:
            self.print_error(str(e))
            return
        self._print_latency()
        self.print_success(f"Jumped to page {page_number}")

    def change_page_size(self) -> None:
        raw = self._read(f"Enter new page size (1-{MAX_PAGE_LIMIT}): ").strip()
        try:
            page_size = int(raw)
        except ValueError:
            self.print_error("Invalid page size")
            return
        try:
            self.navigator.change_page_size(page_size)
        except ValueError as e:
            self.print_error(str(e))
            return
        self._print_latency()
        self.print_success(f"Page size changed to {page_size}")

    def search_user(self) -> None:
        term = self._read("Enter search term (name or email): ").strip()
        if not term:
            self.print_warning("Search term cannot be empty")
            return

        self.console.print("\nSearching...")
        results = search_users(self.loaded_users, term)
        if results:
            self.console.print("\nFound in loaded users:")
            for user in results:
                self.console.print(
                    f"  • {escape(str(user.name))} ({escape(str(user.email))}) "
                    f"- ID: {escape(user.id)}"
                )
        self.console.print("\nNote: Full search requires loading all users (option 7)")

    def load_all_users(self) -> None:
        self.console.print("[yellow]Loading all users... This may take a while.")
        self.console.print("Press Ctrl+C to cancel\n")

        self.loaded_users.clear()
        page_number = 0
        for page_number, page in enumerate(
            self.service.iter_all_users(limit=MAX_PAGE_LIMIT), start=1
        ):
            self.console.print(f"Loading page {page_number}... ")
            self.loaded_users.extend(page.data)
            self.statistics.update(page.data)

        self.print_success(
            f"Loaded {len(self.loaded_users)} users in {page_number} pages"
        )

    def show_statistics(self) -> None:
        self.console.clear()
        self.console.print("[b cyan]═══ Statistics ═══")
        self.console.print(f"\nAPI Calls: {self.statistics.api_calls}")
        if self.statistics.api_calls:
            self.console.print(
                f"Average Response Time: {self.statistics.average_response_ms} ms"
            )
        self.console.print(f"\nTotal Users Loaded: {len(self.loaded_users)}")

        if self.statistics.time_zones:
            table = Table("Time Zone", "Users", title="Users by Time Zone")
            for time_zone, count in self.statistics.top_time_zones():
                table.add_row(escape(time_zone), str(count))
            self.console.print(table)

        if self.statistics.roles:
            table = Table("Role", "Users", title="Users by Role")
            for role, count in self.statistics.roles_by_count():
                table.add_row(escape(role), str(count))
            self.console.print(table)

    def export_data(self) -> None:
        if not self.loaded_users:
            self.print_warning("No data to export. Load users first (option 7)")
            return

        fmt = EXPORT_FORMATS.get(
            self._read("Export format ((c)sv/(j)son): ").strip().lower()
        )
        if fmt is None:
            self.print_error("Invalid format. Choose 'csv' or 'json'")
            return

        path = self.export_dir / export_filename(fmt)
        try:
            count = export_users(self.loaded_users, fmt, path)
        except OSError as e:
            self.print_error(f"Export failed: {e}")
            return
        self.print_success(f"Exported {count} users to {path}")

    def print_success(self, message: str) -> None:
        self.console.print(f"[green]✓ {escape(message)}")

    def print_warning(self, message: str) -> None:
        self.console.print(f"[yellow]⚠ {escape(message)}")

    def print_error(self, message: str) -> None:
        self.console.print(f"[red]✗ {escape(message)}")

    def print_goodbye(self) -> None:
        self.console.clear()
        self.console.print(
            "\n[b blue]Thank you for using PagerDuty User Explorer!\n"
            "\nStatistics for this session:"
        )
        self.console.print(f"  • API calls made: {self.statistics.api_calls}")
        self.console.print(f"  • Users examined: {len(self.loaded_users)}")
        if self.statistics.api_calls:
            self.console.print(
                f"  • Avg response time: {self.statistics.average_response_ms} ms"
            )
        self.console.print("\nGoodbye! 👋\n")
