import random
import re

from typing import List, Optional, Sequence, TypeVar

from .errors import InvalidParameterError, MissingParameterError

T = TypeVar("T")

_leading_int_re = re.compile(r"^\s*([+-]?[0-9]+)")


def validate_id(raw: Optional[str]) -> int:
    """Turn a raw command argument into a quiz id.

    - ``None`` (argument not given) raises ``MissingParameterError``.
    - Otherwise the leading integer is parsed: surrounding whitespace and an
      optional sign are accepted, anything after the digits is ignored
      (``"12abc"`` -> 12, ``"3.9"`` -> 3).
    - No leading digits raises ``InvalidParameterError``.
    No bounds checking; existence is the repository's call.
    """
    if raw is None:
        raise MissingParameterError("id")
    match = _leading_int_re.match(str(raw))
    if not match:
        raise InvalidParameterError(str(raw), "id")
    return int(match.group(1))


def normalize_answer(text: Optional[str]) -> str:
    return (text or "").strip().upper()


def answers_match(given: Optional[str], expected: Optional[str]) -> bool:
    """Case-insensitive comparison ignoring surrounding whitespace."""
    return normalize_answer(given) == normalize_answer(expected)


def shuffled(
    items: Sequence[T], rng: Optional[random.Random] = None
) -> List[T]:
    """Return a uniformly shuffled copy of ``items`` (Fisher-Yates)."""
    out = list(items)
    (rng or random.Random()).shuffle(out)
    return out
