"""
Pattern engine: substitutes placeholder values into a path pattern and
produces a clean, relative target path.
"""

import os
import re
from typing import Mapping, Optional

from pipeline.sanitizer import SanitizeMode, sanitize

_SEPARATORS = re.compile(r'[/\\]')


def apply_pattern(pattern: str, placeholders: Mapping[str, str]) -> str:
    """
    Replace every placeholder token in the pattern, ignoring case.

    All tokens are matched in a single pass, so a substituted value is never
    scanned again for further tokens. Text that is not a known token, such as
    an unrecognized {name}, is left as is.
    """
    if not placeholders:
        return pattern.strip()

    values = {key.lower(): value or "" for key, value in placeholders.items()}
    # Longest first so no token can shadow a longer one sharing its prefix
    alternatives = sorted(values, key=len, reverse=True)
    token_re = re.compile('|'.join(re.escape(key) for key in alternatives), re.IGNORECASE)

    return token_re.sub(lambda m: values[m.group(0).lower()], pattern).strip()


def build_relative_path(
    pattern: str,
    placeholders: Mapping[str, str],
    required_ext: str,
    sep: str = os.sep
) -> Optional[str]:
    """
    Build the destination-relative path for one file.

    Args:
        pattern: User path pattern, using / or \\ as directory separators
        placeholders: Token to value mapping from resolve_placeholders
        required_ext: Extension the file name must end with, e.g. ".mp3"
        sep: Separator used to join the resulting segments

    Returns:
        The relative path, or None when the pattern resolves to nothing
    """
    resolved = apply_pattern(pattern, placeholders)
    # A trailing separator would otherwise put the extension in its own segment
    resolved = resolved.rstrip('/\\').rstrip()
    if not resolved:
        return None

    if not resolved.lower().endswith(required_ext.lower()):
        resolved += required_ext

    segments = []
    for part in _SEPARATORS.split(resolved):
        if not part:
            continue
        cleaned = sanitize(part, SanitizeMode.SEGMENT)
        # "." and ".." sanitize to nothing and are dropped with other empties
        if cleaned:
            segments.append(cleaned)

    if not segments:
        return None

    # Sanitizing may have eaten the extension, e.g. a bare ".mp3" file name
    if not segments[-1].lower().endswith(required_ext.lower()):
        segments[-1] += required_ext

    return sep.join(segments)
