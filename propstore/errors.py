from __future__ import annotations

import os
from typing import List, Optional, Sequence, Union

from .models import ReportItem


class SettingsError(Exception):
    """Base class for everything this package raises."""


class InvalidKey(SettingsError, ValueError):
    def __init__(self, key: object, reason: str):
        self.key = key
        self.reason = reason
        super().__init__(f"invalid key {key!r}: {reason}")


class InvalidValue(SettingsError, ValueError):
    def __init__(self, key: str, value: object, reason: str):
        self.key = key
        self.value = value
        self.reason = reason
        super().__init__(f"invalid value for key {key!r}: {reason}")


class ParseError(SettingsError, ValueError):
    """
    Raised when properties content cannot be turned into a table.

    `issues` holds one ReportItem per malformed line, in file order, so a
    caller can show every problem at once instead of fixing them one by one.
    """

    def __init__(self, issues: Sequence[ReportItem], source: Optional[str] = None):
        self.issues: List[ReportItem] = list(issues)
        self.source = source

        where = f" in {source}" if source else ""
        if len(self.issues) == 1:
            item = self.issues[0]
            line = f" at line {item.line}" if item.line is not None else ""
            msg = f"malformed properties{where}{line}: {item.issue} ({item.value!r})"
        else:
            lines = ", ".join(str(i.line) for i in self.issues if i.line is not None)
            msg = f"{len(self.issues)} malformed lines{where}: {lines}"
        super().__init__(msg)


class IoError(SettingsError, OSError):
    """Wraps the OSError raised while reading or writing a settings file."""

    def __init__(self, path: Union[str, os.PathLike], operation: str, cause: OSError):
        self.path = os.fspath(path) if isinstance(path, (str, os.PathLike)) else str(path)
        self.operation = operation
        self.cause = cause
        super().__init__(f"cannot {operation} {self.path}: {cause.strerror or cause}")
        self.errno = cause.errno
