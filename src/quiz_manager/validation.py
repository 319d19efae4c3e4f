"""Command argument validation."""

from __future__ import annotations

import re

from .errors import MissingParameterError, NotANumberError

__all__ = ["validate_id"]

# Leading ASCII integer, like ``parseInt``: "12abc" -> 12, "3.9" -> 3.
_LEADING_INT = re.compile(r"\s*([+-]?[0-9]+)")


def validate_id(raw_id: str | None) -> int:
    """Parse the ``<id>`` argument of a command.

    Only the shape is checked here. Whether a quiz with that id exists is up
    to the repository, so zero and negative values pass. A digit run longer
    than the interpreter's integer conversion limit is not a usable id and
    is reported as not a number.
    """

    if raw_id is None:
        raise MissingParameterError("id")
    match = _LEADING_INT.match(str(raw_id))
    if match is None:
        raise NotANumberError(str(raw_id), "id")
    try:
        return int(match.group(1))
    except ValueError as exc:
        raise NotANumberError(str(raw_id), "id") from exc
