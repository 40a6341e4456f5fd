from typing import Any


class MissingEnvironmentVariableError(Exception):
    def __init__(self, name: str) -> None:
        super().__init__(f"Could not find environment variable: {name}")
        self.name = name


class PagerDutyApiError(Exception):
    def __init__(self, msg: Any, status_code: int) -> None:
        super().__init__(f"{msg}: {status_code}")
        self.status_code = status_code

    @property
    def is_rate_limited(self) -> bool:
        return self.status_code == 429


class TransactionError(Exception):
    pass


class TransactionValidationError(TransactionError):
    pass
