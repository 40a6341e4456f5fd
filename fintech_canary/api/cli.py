import logging
import os
import sys
import traceback
from collections.abc import Callable
from pathlib import Path
from typing import Any

import click
import sentry_sdk
from sentry_sdk.integrations.logging import LoggingIntegration

from fintech_canary.api.demo import PagingUserCanary
from fintech_canary.api.interactive import InteractiveExplorer
from fintech_canary.api.ledger_demo import LedgerCanary
from fintech_canary.application.export import export_filename, export_users
from fintech_canary.application.pagerduty_user_service import (
    MAX_PAGE_LIMIT,
    PagerDutyUserService,
)
from fintech_canary.application.user_queries import UserStatistics
from fintech_canary.status import ExitCodes
from fintech_canary.utils import config
from fintech_canary.utils.environ import PAGERDUTY_API_TOKEN, environ, get_required
from fintech_canary.utils.environment import CANARY_CONFIG, init_env
from fintech_canary.utils.exceptions import (
    MissingEnvironmentVariableError,
    PagerDutyApiError,
)
from fintech_canary.utils.hooks import LatencyTracker
from fintech_canary.utils.output import OUTPUT_FORMATS, print_output

TOKEN_HELP = f"""
{PAGERDUTY_API_TOKEN} is not set.

Please set it with: export {PAGERDUTY_API_TOKEN}=your_token_here

Navigate here:

https://developer.pagerduty.com/api-reference/c96e889522dd6-list-users

To retrieve your testing token.
"""

USER_COLUMNS = ["id", "name", "email", "role", "time_zone", "job_title"]


def sentry_event_level(value: str) -> int:
    match value.upper():
        case "CRITICAL":
            return logging.CRITICAL
        case "ERROR":
            return logging.ERROR
        case _:
            raise ValueError(
                "Invalid value for SENTRY_EVENT_LEVEL. Must be CRITICAL or ERROR."
            )


# Enable Sentry
if os.getenv("SENTRY_DSN"):
    sentry_sdk.init(
        os.environ["SENTRY_DSN"],
        integrations=[
            LoggingIntegration(
                event_level=sentry_event_level(
                    os.environ.get("SENTRY_EVENT_LEVEL", "CRITICAL")
                )
            ),
        ],
    )


def config_file(function: Callable) -> Callable:
    function = click.option(
        "--config",
        "configfile",
        default=lambda: os.environ.get(CANARY_CONFIG),
        help="Path to an optional configuration file in toml format.",
    )(function)
    return function


def log_level(function: Callable) -> Callable:
    function = click.option(
        "--log-level",
        help="log-level of the command. Defaults to INFO.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]),
    )(function)
    return function


def output_format(function: Callable) -> Callable:
    function = click.option(
        "--output",
        "-o",
        help="output type",
        default="table",
        type=click.Choice(OUTPUT_FORMATS),
    )(function)
    return function


def build_service(latency: LatencyTracker | None = None) -> PagerDutyUserService:
    settings = config.pagerduty_settings()
    hooks: dict[str, Any] = {}
    if latency:
        hooks = {"pre_hooks": [latency.start], "post_hooks": [latency.stop]}
    return PagerDutyUserService(
        token=get_required(PAGERDUTY_API_TOKEN),
        url=settings.url,
        timeout=settings.timeout,
        **hooks,
    )


def run_command(func: Callable, *args: Any, **kwargs: Any) -> None:
    try:
        func(*args, **kwargs)
    except MissingEnvironmentVariableError as e:
        if e.name == PAGERDUTY_API_TOKEN:
            sys.stderr.write(TOKEN_HELP + "\n")
        else:
            sys.stderr.write(str(e) + "\n")
        sys.exit(ExitCodes.ERROR)
    except (PagerDutyApiError, config.ConfigNotFound) as e:
        sys.stderr.write(str(e) + "\n")
        sys.exit(ExitCodes.ERROR)
    except Exception as e:
        sys.stderr.write(f"Failed to run: {e}\n")
        traceback.print_exc(file=sys.stderr)
        sys.exit(ExitCodes.ERROR)


@environ([PAGERDUTY_API_TOKEN])
def _run_interactive() -> None:
    latency = LatencyTracker()
    with build_service(latency) as service:
        InteractiveExplorer(
            service,
            statistics=UserStatistics(latency),
            page_size=config.pagerduty_settings().page_size,
        ).run()


@environ([PAGERDUTY_API_TOKEN])
def _run_demo(full_pagination: bool = False, user_id: str | None = None) -> None:
    with build_service() as service:
        PagingUserCanary(service).run_demo(
            full_pagination=full_pagination, user_id=user_id
        )


def _stdin_is_terminal() -> bool:
    return sys.stdin.isatty()


@environ([PAGERDUTY_API_TOKEN])
def _run_default() -> None:
    if not _stdin_is_terminal():
        # no terminal to interact with, run the simple demo
        _run_demo()
        return

    click.echo("PagerDuty API Canary")
    click.echo("====================")
    click.echo("1. Run simple demo")
    click.echo("2. Run interactive explorer")
    choice = click.prompt("\nChoice (1-2)", default="1", show_default=False)
    if choice.strip() == "2":
        _run_interactive()
    else:
        _run_demo()


@click.group(invoke_without_command=True)
@config_file
@log_level
@click.option(
    "--interactive",
    "-i",
    is_flag=True,
    default=False,
    help="Start the interactive PagerDuty user explorer.",
)
@click.pass_context
def root(
    ctx: click.Context,
    configfile: str | None,
    log_level: str | None,
    interactive: bool,
) -> None:
    """PagerDuty API canary."""
    run_command(init_env, log_level=log_level, config_file=configfile)

    if ctx.invoked_subcommand is not None:
        if interactive:
            raise click.UsageError("--interactive can not be combined with a command")
        return

    if interactive:
        click.echo("Starting interactive mode...")
        run_command(_run_interactive)
    else:
        run_command(_run_default)


@root.command(short_help="List one page of PagerDuty users.")
@click.option("--offset", default=0, type=click.IntRange(min=0), help="Page offset.")
@click.option(
    "--limit",
    default=None,
    type=click.IntRange(1, MAX_PAGE_LIMIT),
    help="Page size. Defaults to the configured page size.",
)
@output_format
@click.option("--sort/--no-sort", default=False, help="Sort the output rows.")
def users(offset: int, limit: int | None, output: str, sort: bool) -> None:
    @environ([PAGERDUTY_API_TOKEN])
    def _users() -> None:
        with build_service() as service:
            page = service.get_users_page(
                offset, limit or config.pagerduty_settings().page_size
            )
        print_output(
            [u.to_json_dict() for u in page.data],
            columns=USER_COLUMNS,
            output=output,
            sort=sort,
        )
        if output == "table":
            click.echo(
                f"\nPage {page.current_page_number()} | offset={page.offset} "
                f"more={page.has_more_pages()} total={page.total}"
            )

    run_command(_users)


@root.command(short_help="Show a single PagerDuty user.")
@click.argument("user_id")
def user(user_id: str) -> None:
    @environ([PAGERDUTY_API_TOKEN])
    def _user() -> None:
        with build_service() as service:
            PagingUserCanary(service).demonstrate_single_user(user_id)

    run_command(_user)


@root.command(short_help="Load all PagerDuty users and export them to a file.")
@click.option(
    "--format",
    "fmt",
    default="csv",
    type=click.Choice(["csv", "json"]),
    help="Export file format.",
)
@click.option(
    "--output-file",
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help="Target file. Defaults to pagerduty_users_<epoch>.<format>.",
)
def export(fmt: str, output_file: Path | None) -> None:
    @environ([PAGERDUTY_API_TOKEN])
    def _export() -> None:
        with build_service() as service:
            all_users = [u for page in service.iter_all_users() for u in page.data]
        path = output_file or Path(export_filename(fmt))
        count = export_users(all_users, fmt, path)
        click.echo(f"Exported {count} users to {path}")

    run_command(_export)


@root.command(short_help="Run the PagerDuty paging demo.")
@click.option(
    "--full-pagination",
    is_flag=True,
    default=False,
    help="Also page through all users (mind the rate limits).",
)
@click.option("--user-id", default=None, help="Also fetch this user.")
def demo(full_pagination: bool, user_id: str | None) -> None:
    run_command(_run_demo, full_pagination=full_pagination, user_id=user_id)


@root.command(short_help="Run the in-memory ledger demo.")
def ledger_demo() -> None:
    run_command(LedgerCanary().run)
