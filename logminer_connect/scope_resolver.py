"""Resolve the table whitelist into capture targets."""

from typing import List

from logminer_connect.models.capture_target import (
    CaptureTarget,
    SchemaTarget,
    TableTarget,
)


def split_whitelist(whitelist: str) -> List[str]:
    """Split a whitelist on ',' and strip each entry.

    Args:
        whitelist: The raw ``table.whitelist`` value.

    Returns:
        List[str]: The trimmed entries in their original order.
    """
    return [entry.strip() for entry in whitelist.split(",")]


def resolve_capture_targets(whitelist: str) -> List[CaptureTarget]:
    """Turn a whitelist such as ``"MY_USER.TABLE, OTHER_SCHEMA"`` into targets.

    An entry with a dot becomes a TableTarget built from its first two
    dot-separated parts; any other entry becomes a SchemaTarget. Order and
    duplicates are kept, identifiers are not case-normalized and nothing is
    rejected: an empty whitelist yields a single ``SchemaTarget(owner="")``.

    Args:
        whitelist: The raw ``table.whitelist`` value.

    Returns:
        List[CaptureTarget]: One target per whitelist entry.
    """
    targets: List[CaptureTarget] = []
    for entry in split_whitelist(whitelist):
        parts = entry.split(".")
        if len(parts) > 1:
            targets.append(TableTarget(owner=parts[0], table=parts[1]))
        else:
            targets.append(SchemaTarget(owner=parts[0]))
    return targets
