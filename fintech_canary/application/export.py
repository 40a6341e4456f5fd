import csv
import json
import time
from collections.abc import Sequence
from pathlib import Path

from fintech_canary.domain.pagerduty import PagerDutyUser

CSV_HEADER = ["ID", "Name", "Email", "Role", "TimeZone", "Status", "JobTitle"]
EXPORT_FORMATS = {"c": "csv", "csv": "csv", "j": "json", "json": "json"}


def export_filename(fmt: str, now: float | None = None) -> str:
    epoch = int(now if now is not None else time.time())
    return f"pagerduty_users_{epoch}.{fmt}"


def export_users_csv(users: Sequence[PagerDutyUser], path: Path | str) -> int:
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.writer(f, lineterminator="\n")
        writer.writerow(CSV_HEADER)
        for u in users:
            writer.writerow([
                u.id,
                u.name or "",
                u.email or "",
                u.role or "",
                u.time_zone or "",
                "" if u.invitation_sent is None else str(u.invitation_sent).lower(),
                u.job_title or "",
            ])
    return len(users)


def export_users_json(users: Sequence[PagerDutyUser], path: Path | str) -> int:
    with open(path, "w", encoding="utf-8") as f:
        json.dump([u.to_json_dict() for u in users], f, indent=2)
        f.write("\n")
    return len(users)


def export_users(users: Sequence[PagerDutyUser], fmt: str, path: Path | str) -> int:
    match EXPORT_FORMATS.get(fmt.strip().lower()):
        case "csv":
            return export_users_csv(users, path)
        case "json":
            return export_users_json(users, path)
        case _:
            raise ValueError("Invalid format. Choose 'csv' or 'json'")
