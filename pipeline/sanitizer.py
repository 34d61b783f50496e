"""
Filename sanitization for planned target paths.

The illegal character sets are fixed rather than taken from the running OS,
so a library organized on Linux keeps the same names when it is later copied
to a Windows or FAT-formatted drive.
"""

import re
from enum import Enum


class SanitizeMode(Enum):
    """What the sanitized text will become."""

    SEGMENT = "segment"
    PATH_FRAGMENT = "path_fragment"


_CONTROL_CHARS = ''.join(chr(code) for code in range(32))
_RESERVED_CHARS = ':|?*"<>'

PATH_FRAGMENT_ILLEGAL = frozenset(_RESERVED_CHARS + _CONTROL_CHARS)
SEGMENT_ILLEGAL = PATH_FRAGMENT_ILLEGAL | frozenset('/\\')

_ILLEGAL_BY_MODE = {
    SanitizeMode.SEGMENT: SEGMENT_ILLEGAL,
    SanitizeMode.PATH_FRAGMENT: PATH_FRAGMENT_ILLEGAL,
}

_MULTI_SPACE = re.compile(r' {2,}')
_EDGE_JUNK = re.compile(r'^[\s.]+|[\s.]+$')


def sanitize(text: str, mode: SanitizeMode = SanitizeMode.SEGMENT) -> str:
    """
    Clean a piece of text so it can be used in a file or directory name.

    Illegal characters become a single space, runs of spaces collapse into
    one, and leading/trailing spaces and dots are removed. Any other
    character, including non-Latin scripts, is kept as is.

    Args:
        text: Text to clean
        mode: SEGMENT for a single path component, PATH_FRAGMENT for text
            that may still carry directory separators

    Returns:
        The sanitized text, possibly empty
    """
    if not text or not text.strip():
        return ""

    illegal = _ILLEGAL_BY_MODE[mode]
    cleaned = ''.join(' ' if ch in illegal else ch for ch in text.strip())
    cleaned = _MULTI_SPACE.sub(' ', cleaned)

    # Windows refuses names ending in a dot or space
    return _EDGE_JUNK.sub('', cleaned)
