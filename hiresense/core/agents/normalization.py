"""Total mappings from untrusted model output to validated analysis values.

The reasoning service is an external producer: its scores, flag kinds and
severities are never taken verbatim. Every function here accepts any input
and returns a value that satisfies the model invariants.
"""

import math
import re
from collections.abc import Mapping
from typing import Any

from ..models.analysis import DEFAULT_SCORE, Flag
from ..models.enums import FlagKind

DEFAULT_FLAG_CATEGORY = "verification"
DEFAULT_FLAG_MESSAGE = "Analysis concern detected"
DEFAULT_SEVERITY = 5

_FLAG_KINDS = {kind.value for kind in FlagKind}

_LINKEDIN = re.compile(r"linked\s*-?\s*in", re.IGNORECASE)
_NAME_MISMATCH = re.compile(
    r"\bnames?\b.*\b(mismatch|match|differ|inconsisten|discrepan)"
    r"|\b(mismatch|differ|inconsisten|discrepan)\w*\b.*\bnames?\b",
    re.IGNORECASE,
)


def _as_number(value: Any) -> int | float | None:
    # Integers stay exact: JSON may carry ints too large for a float
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            value = float(text)
        except ValueError:
            return None
    if isinstance(value, float) and math.isfinite(value):
        return value
    return None


def _clamp(value: int | float, low: int, high: int) -> int:
    if isinstance(value, float):
        value = round(value)
    return max(low, min(high, value))


def normalize_score(raw: Any, default: int = DEFAULT_SCORE) -> int:
    """Round and clamp a score into [0, 100]; non-numeric input yields ``default``."""
    number = _as_number(raw)
    if number is None:
        return default
    return _clamp(number, 0, 100)


def normalize_severity(raw: Any) -> int:
    number = _as_number(raw)
    if number is None:
        return DEFAULT_SEVERITY
    return _clamp(number, 1, 10)


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return default


def normalize_flag(raw: Any) -> Flag:
    """Coerce one externally produced flag into a valid :class:`Flag`.

    Unknown kinds become ``yellow`` and severity is clamped into [1, 10].
    """
    if not isinstance(raw, Mapping):
        raw = {}

    kind = raw.get("type", raw.get("kind"))
    kind = kind.strip().lower() if isinstance(kind, str) else None
    if kind not in _FLAG_KINDS:
        kind = FlagKind.YELLOW.value

    return Flag(
        kind=kind,
        category=_text(raw.get("category"), DEFAULT_FLAG_CATEGORY),
        message=_text(raw.get("message"), DEFAULT_FLAG_MESSAGE),
        severity=normalize_severity(raw.get("severity")),
    )


def normalize_flags(raw: Any) -> list[Flag]:
    """Normalize a list of flags; anything that is not a list yields no flags."""
    if not isinstance(raw, list):
        return []
    return [normalize_flag(item) for item in raw]


def normalize_questions(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [q.strip() for q in raw if isinstance(q, str) and q.strip()]


def normalize_summary(raw: Any, default: str) -> str:
    return _text(raw, default)


def is_name_mismatch_flag(flag: Flag) -> bool:
    """True when a flag complains that names do not match."""
    return bool(_NAME_MISMATCH.search(f"{flag.category} {flag.message}"))


def is_synthetic_name_flag(flag: Flag) -> bool:
    """True when a flag blames LinkedIn for a candidate name mismatch."""
    text = f"{flag.category} {flag.message}"
    return bool(_LINKEDIN.search(text) and _NAME_MISMATCH.search(text))


def drop_name_mismatch_flags(flags: list[Flag], linkedin_only: bool = False) -> list[Flag]:
    match = is_synthetic_name_flag if linkedin_only else is_name_mismatch_flag
    return [flag for flag in flags if not match(flag)]
