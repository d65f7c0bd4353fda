from __future__ import annotations

from typing import Optional

from .codec import Codec, PropertiesCodec
from .store import Settings


class SettingsBuilder:
    """
    Picks the file format for a new Settings.

    Only the properties format exists today; further `file_type_*` selectors
    slot in next to `file_type_properties` without changing Settings.
    """

    def __init__(self):
        self._codec: Optional[Codec] = None

    def file_type_properties(self) -> "SettingsBuilder":
        self._codec = PropertiesCodec()
        return self

    def codec(self, codec: Codec) -> "SettingsBuilder":
        self._codec = codec
        return self

    def build(self) -> Settings:
        return Settings(self._codec if self._codec is not None else PropertiesCodec())


def builder() -> SettingsBuilder:
    return SettingsBuilder()
