import os
from collections.abc import Callable, Iterable
from functools import wraps
from typing import Any

from fintech_canary.utils.exceptions import MissingEnvironmentVariableError

PAGERDUTY_API_TOKEN = "PAGERDUTY_API_TOKEN"


def get_required(name: str) -> str:
    value = os.environ.get(name, "")
    if not value.strip():
        raise MissingEnvironmentVariableError(name)
    return value


def environ(variables: Iterable[str] | None = None) -> Callable:
    """Check that environment variables are set before execution."""
    if variables is None:
        variables = []

    def deco_environ(f: Callable) -> Callable:
        @wraps(f)
        def f_environ(*args: Any, **kwargs: Any) -> Any:
            for e in variables:
                get_required(e)
            return f(*args, **kwargs)

        return f_environ

    return deco_environ
