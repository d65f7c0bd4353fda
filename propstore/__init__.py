"""
propstore: a settings table persisted as a `key = value` properties file.

    from propstore import builder

    p = builder().file_type_properties().build()
    p.set_property("HttpPort", "8081")
    p.set_property_slice("LogLevel", ["Debug", "Info", "Warn"])
    p.store_to_file("config.properties")

Values containing "," are read back as lists; there is no escape syntax.
"""

import logging

from .builder import SettingsBuilder, builder
from .codec import Codec, PropertiesCodec, parse, parse_with_report, serialize
from .errors import InvalidKey, InvalidValue, IoError, ParseError, SettingsError
from .models import ListValue, ParseReport, ParseResult, ReportItem, SingleValue, Table
from .store import Settings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    "Codec",
    "InvalidKey",
    "InvalidValue",
    "IoError",
    "ListValue",
    "ParseError",
    "ParseReport",
    "ParseResult",
    "PropertiesCodec",
    "ReportItem",
    "Settings",
    "SettingsBuilder",
    "SettingsError",
    "SingleValue",
    "Table",
    "builder",
    "parse",
    "parse_with_report",
    "serialize",
]
