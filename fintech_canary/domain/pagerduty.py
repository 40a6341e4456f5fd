"""Pydantic models for the PagerDuty users API.

All models are immutable (frozen=True). PagerDutyUser keeps any field the
API sends that is not modelled here, so new API attributes survive a
load/export round without code changes.
"""

import math
from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator

T = TypeVar("T")


class PagerDutyUser(BaseModel):
    """PagerDuty user as returned by GET /users and GET /users/{id}.

    Attributes:
        id: PagerDuty user ID
        type: Object type, e.g. "user"
        self_url: API URL of the user (JSON key "self")
    """

    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)

    id: str
    type: str
    name: str | None = None
    email: str | None = None
    summary: str | None = None
    self_url: str | None = Field(None, alias="self")
    html_url: str | None = None
    avatar_url: str | None = None
    color: str | None = None
    role: str | None = None
    description: str | None = None
    invitation_sent: bool | None = None
    job_title: str | None = None
    time_zone: str | None = None

    @property
    def unknown_fields(self) -> dict[str, Any]:
        return dict(self.model_extra or {})

    def has_unknown_fields(self) -> bool:
        """True if the API sent attributes this model does not know about."""
        return bool(self.model_extra)

    def get_unknown_field(self, field_name: str) -> Any:
        return self.unknown_fields.get(field_name)

    def with_unknown_field(self, key: str, value: Any) -> "PagerDutyUser":
        """Return a copy of this user with an additional unknown field.

        Modelled fields are never changed, even when key matches one of them.
        """
        copied = self.model_copy()
        extra = {**self.unknown_fields, key: value}
        object.__setattr__(copied, "__pydantic_extra__", extra)
        return copied

    def to_json_dict(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        # modelled fields win over unknown fields of the same name
        for name, info in type(self).model_fields.items():
            data[info.alias or name] = getattr(self, name)
        return data


class PagedResponse(BaseModel, Generic[T]):
    """Generic offset based page of API results."""

    model_config = ConfigDict(frozen=True)

    limit: int = Field(..., ge=0)
    offset: int = Field(..., ge=0)
    more: bool = False
    total: int | None = None
    data: tuple[T, ...]

    def has_more_pages(self) -> bool:
        return self.more

    def item_count(self) -> int:
        return len(self.data)

    def is_empty(self) -> bool:
        return not self.data

    def next_offset(self) -> int:
        return self.offset + self.limit

    def previous_offset(self) -> int:
        return max(0, self.offset - self.limit)

    def is_first_page(self) -> bool:
        return self.offset == 0

    def estimated_total_pages(self) -> int | None:
        if self.total is None or self.limit == 0:
            return None
        return math.ceil(self.total / self.limit)

    def current_page_number(self) -> int:
        """1-based page number of this page."""
        if self.limit == 0:
            return 1
        return self.offset // self.limit + 1


class PagerDutyUsersResponse(BaseModel):
    """Envelope of the GET /users list endpoint.

    Example payload:
        {"users": [...], "limit": 25, "offset": 0, "more": true, "total": null}
    """

    model_config = ConfigDict(frozen=True)

    users: tuple[PagerDutyUser, ...] = ()
    limit: int = Field(0, ge=0)
    offset: int = Field(0, ge=0)
    more: bool = False
    total: int | None = None

    @field_validator("users", mode="before")
    @classmethod
    def users_default(cls, v: Sequence[Any] | None) -> Sequence[Any]:
        return v if v is not None else ()

    def to_paged_response(self) -> PagedResponse[PagerDutyUser]:
        return PagedResponse[PagerDutyUser](
            limit=self.limit,
            offset=self.offset,
            more=self.more,
            total=self.total,
            data=self.users,
        )

    def has_more_pages(self) -> bool:
        return self.more

    def user_count(self) -> int:
        return len(self.users)

    def is_empty(self) -> bool:
        return not self.users

    def next_offset(self) -> int:
        return self.offset + self.limit

    def pagination_logging_info(self) -> str:
        return (
            f"offset={self.offset}, limit={self.limit}, count={len(self.users)}, "
            f"more={str(self.more).lower()}, total={self.total}"
        )
