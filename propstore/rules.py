"""
Properties format rules.

Everything the codec treats as syntax lives here so the parser and the
serializer agree on it.
"""

KEY_VALUE_SEPARATOR = "="
LIST_SEPARATOR = ","
COMMENT_PREFIXES = ("#", "!")

# Written between key and value on output; the parser trims it back off.
OUTPUT_SEPARATOR = " = "
LINE_TERMINATOR = "\n"

# Characters a key or value can never carry (the format is line-oriented).
LINE_BREAKS = ("\n", "\r")

TARGET_ENCODING = "utf-8"  # no BOM on output
UTF8_BOM = b"\xef\xbb\xbf"
