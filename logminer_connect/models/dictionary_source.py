"""LogMiner dictionary source definitions."""

from enum import Enum


class LogminerDictionarySource(str, Enum):
    """Where LogMiner resolves object and column metadata from."""

    ONLINE = "ONLINE"
    REDO_LOG = "REDO_LOG"
