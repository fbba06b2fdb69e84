#!/usr/bin/env python3
"""Print the connector configuration reference."""

import sys
from enum import Enum
from typing import Dict, List, Union, get_args, get_origin

from loguru import logger
from tabulate import tabulate

from logminer_connect.connector_config import SourceConnectorConfig
from logminer_connect.logging_config import configure_logging


def _type_name(annotation) -> str:
    """Get a short type name for a field annotation."""
    if get_origin(annotation) is Union:
        # Optional[int] and friends
        args = [a for a in get_args(annotation) if a is not type(None)]
        annotation = args[0]
    if isinstance(annotation, type) and issubclass(annotation, Enum):
        return "string"
    name = getattr(annotation, "__name__", str(annotation))
    return {"str": "string", "SecretStr": "password", "bool": "boolean"}.get(name, name)


def _default_text(field) -> str:
    if field.is_required():
        return ""
    default = field.default
    if default is None:
        return "null"
    if isinstance(default, Enum):
        return default.value
    if isinstance(default, bool):
        return str(default).lower()
    return str(default)


def config_reference() -> List[Dict[str, str]]:
    """List every connector property with its type, default and description.

    Returns:
        List[Dict[str, str]]: One row per property, in declaration order.
    """
    rows = []
    for field in SourceConnectorConfig.model_fields.values():
        extra = field.json_schema_extra or {}
        rows.append(
            {
                "key": field.alias,
                "type": _type_name(field.annotation),
                "default": _default_text(field),
                "importance": extra.get("importance", ""),
                "description": field.description or "",
            }
        )
    return rows


def render_config_reference(tablefmt: str = "rst") -> str:
    """Render the configuration reference as a table.

    Args:
        tablefmt: Any tabulate table format.

    Returns:
        str: The rendered table.
    """
    rows = config_reference()
    headers = ["Key", "Type", "Default", "Importance", "Description"]
    table_data = [
        [row["key"], row["type"], row["default"], row["importance"], row["description"]]
        for row in rows
    ]
    return tabulate(table_data, headers=headers, tablefmt=tablefmt)


def main() -> int:
    """Print the configuration reference to stdout."""
    configure_logging()
    try:
        print(render_config_reference())
    except Exception as e:
        logger.error(f"Failed to render configuration reference: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
