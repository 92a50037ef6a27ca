"""
Text utilities

Provider and roster text ends up in XML, which cannot carry every Unicode
code point.
"""
import re


REPLACEMENT_CHARACTER = chr(0xFFFD)

# XML 1.0 Char production, besides tab, newline and carriage return
_XML_CHAR_RANGES = ((0x20, 0xD7FF), (0xE000, 0xFFFD), (0x10000, 0x10FFFF))

_XML_INVALID_CHARS = re.compile(
    "[^\t\n\r" + "".join(f"{chr(low)}-{chr(high)}" for low, high in _XML_CHAR_RANGES) + "]"
)


def xml_safe_text(value: str) -> str:
    """
    Replace characters that XML 1.0 cannot represent with U+FFFD

    Args:
        value: Raw text, e.g. a provider show name

    Returns:
        Text that lxml will serialize
    """
    return _XML_INVALID_CHARS.sub(REPLACEMENT_CHARACTER, value)
