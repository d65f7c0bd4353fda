from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import IO, Iterable, Iterator, List, Optional, Union

from .codec import Codec, PropertiesCodec, decode_bytes
from .errors import InvalidKey, InvalidValue, IoError, ParseError
from .models import ListValue, ParseReport, SingleValue, Table
from .rules import KEY_VALUE_SEPARATOR, LINE_BREAKS, TARGET_ENCODING

logger = logging.getLogger(__name__)

PathLike = Union[str, "os.PathLike[str]"]
DEFAULT_FILE_MODE = 0o644


def _target_mode(target: Path) -> int:
    try:
        return stat.S_IMODE(target.stat().st_mode)
    except FileNotFoundError:
        return DEFAULT_FILE_MODE


def validate_key(key: str) -> None:
    if not isinstance(key, str):
        raise InvalidKey(key, f"expected str, got {type(key).__name__}")
    # keys are trimmed on load, so a blank key could never be read back
    if not key.strip():
        raise InvalidKey(key, "key is empty")
    if KEY_VALUE_SEPARATOR in key:
        raise InvalidKey(key, f"key contains {KEY_VALUE_SEPARATOR!r}")
    if any(c in key for c in LINE_BREAKS):
        raise InvalidKey(key, "key contains a line break")


def validate_value(key: str, value: str) -> None:
    if not isinstance(value, str):
        raise InvalidValue(key, value, f"expected str, got {type(value).__name__}")
    if any(c in value for c in LINE_BREAKS):
        raise InvalidValue(key, value, "value contains a line break")


class Settings:
    """
    In-memory settings table bound to one codec.

    Values are either single strings or ordered lists of strings; which one a
    key holds decides which accessor finds it (`property` vs `property_slice`).
    Persistence is explicit: nothing touches disk outside `load_*`/`store_*`.

    Not thread-safe. Share a Settings between threads only behind a lock.
    """

    def __init__(self, codec: Optional[Codec] = None):
        self._codec: Codec = codec if codec is not None else PropertiesCodec()
        self._table: Table = {}
        self._last_report: Optional[ParseReport] = None

    def __repr__(self) -> str:
        return f"Settings(codec={self._codec.name!r}, entries={len(self._table)})"

    def __len__(self) -> int:
        return len(self._table)

    def __contains__(self, key: object) -> bool:
        return key in self._table

    def __iter__(self) -> Iterator[str]:
        return iter(self.property_names())

    @property
    def codec(self) -> Codec:
        return self._codec

    @property
    def last_report(self) -> Optional[ParseReport]:
        """Report of the most recent successful load, None before any load."""
        return self._last_report

    # Accessors -----------------------------------------------------------
    def property(self, key: str) -> Optional[str]:
        value = self._table.get(key)
        if isinstance(value, SingleValue):
            return value.value
        return None

    def property_slice(self, key: str) -> Optional[List[str]]:
        value = self._table.get(key)
        if isinstance(value, ListValue):
            return list(value.values)
        return None

    def property_names(self) -> List[str]:
        return sorted(self._table)

    # Mutators ------------------------------------------------------------
    def set_property(self, key: str, value: str) -> None:
        validate_key(key)
        validate_value(key, value)
        self._table[key] = SingleValue(value=value)

    def set_property_slice(self, key: str, values: Iterable[str]) -> None:
        validate_key(key)
        if isinstance(values, (str, bytes)):
            raise InvalidValue(key, values, "expected a sequence of str, got a single string")
        try:
            items = tuple(values)
        except TypeError:
            raise InvalidValue(key, values, f"expected a sequence of str, got {type(values).__name__}") from None
        for item in items:
            validate_value(key, item)
        self._table[key] = ListValue(values=items)

    def remove_property(self, key: str) -> bool:
        return self._table.pop(key, None) is not None

    # Persistence ---------------------------------------------------------
    def _replace_from_text(self, text: str, encoding: Optional[str], source: Optional[str]) -> None:
        result = self._codec.parse_with_report(text)
        if result.report.errors:
            raise ParseError(result.report.errors, source=source)
        result.report.encoding = encoding
        # Full replace; the old table survives any failure above.
        self._table = dict(result.table)
        self._last_report = result.report
        logger.debug("loaded %d entries from %s", len(self._table), source or "stream")

    def load(self, stream: IO) -> None:
        """Replace the table with the content read from a text or binary stream."""
        try:
            data = stream.read()
        except OSError as e:
            raise IoError(getattr(stream, "name", "<stream>"), "read", e) from e
        if isinstance(data, bytes):
            text, encoding = decode_bytes(data)
        else:
            text, encoding = data, None
        self._replace_from_text(text, encoding, getattr(stream, "name", None))

    def load_from_file(self, path: PathLike) -> None:
        try:
            with open(path, "rb") as fh:
                raw = fh.read()
        except OSError as e:
            raise IoError(path, "read", e) from e

        try:
            text, encoding = decode_bytes(raw)
        except ParseError as e:
            raise ParseError(e.issues, source=os.fspath(path)) from None
        self._replace_from_text(text, encoding, os.fspath(path))

    def dumps(self) -> str:
        return self._codec.serialize(self._table)

    def store(self, stream: IO) -> None:
        """Write the serialized table to a text or binary stream."""
        text = self.dumps()
        try:
            try:
                stream.write(text)
            except TypeError:
                # binary sink; str is rejected before anything is written
                stream.write(text.encode(TARGET_ENCODING))
        except OSError as e:
            raise IoError(getattr(stream, "name", "<stream>"), "write", e) from e

    def store_to_file(self, path: PathLike) -> None:
        """
        Serialize the table and write it to `path`, creating or truncating it.

        The text goes to a temp file next to the target first and is then
        moved over it, so readers never see a half-written file.
        """
        text = self.dumps()
        target = Path(path)

        tmp_name = None
        try:
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{target.name}.", suffix=".tmp", dir=str(target.parent)
            )
            with os.fdopen(fd, "w", encoding=TARGET_ENCODING, newline="") as fh:
                fh.write(text)
            # mkstemp creates 0600; keep the mode of the file being replaced
            os.chmod(tmp_name, _target_mode(target))
            os.replace(tmp_name, target)
            tmp_name = None
        except OSError as e:
            raise IoError(path, "write", e) from e
        finally:
            if tmp_name is not None:
                try:
                    os.unlink(tmp_name)
                except OSError:
                    pass

        logger.debug("stored %d entries to %s", len(self._table), target)
