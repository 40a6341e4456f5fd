import json
import re
from collections.abc import Iterable, Sequence
from typing import Any

import yaml
from tabulate import tabulate

OUTPUT_FORMATS = ["table", "md", "json", "yaml"]


def print_output(
    content: Iterable[dict[str, Any]],
    columns: Sequence[str] = (),
    output: str = "table",
    sort: bool = False,
) -> str:
    content = list(content)
    if sort:
        content = sorted(content, key=lambda c: tuple(str(v) for v in c.values()))

    match output:
        case "table":
            formatted_content = format_table(content, columns)
        case "md":
            formatted_content = re.sub(
                r" +", " ", format_table(content, columns, table_format="github")
            )
        case "json":
            formatted_content = json.dumps(content, indent=2)
        case "yaml":
            formatted_content = yaml.safe_dump(content, sort_keys=False)
        case _:
            raise ValueError(f"unsupported output format: {output}")

    print(formatted_content)
    return formatted_content


def _format_cell(item: dict[str, Any], column: str, table_format: str) -> Any:
    # column 'user.name' reads item['user']['name']
    raw_data: Any = item
    for token in column.split("."):
        raw_data = raw_data.get(token) if isinstance(raw_data, dict) else None
        if raw_data is None:
            return ""

    if isinstance(raw_data, list):
        separator = "<br />" if table_format == "github" else "\n"
        raw_data = separator.join(str(d) for d in raw_data)

    if isinstance(raw_data, str) and table_format == "github":
        return raw_data.replace("|", "&#124;")

    return raw_data


def format_table(
    content: Iterable[dict[str, Any]],
    columns: Sequence[str],
    table_format: str = "simple",
) -> str:
    headers = [column.upper() for column in columns]
    table_data = [
        [_format_cell(item, column, table_format) for column in columns]
        for item in content
    ]
    return tabulate(table_data, headers=headers, tablefmt=table_format)
