"""Version string helpers for container image tags.

Image tags are loose ("7.2", "7.2.4-alpine", "6.0-rc1"), so comparison follows
the usual "canonicalize then compare part by part" rules: separators ``-``,
``_`` and ``+`` act like ``.``, a boundary between digits and letters starts a
new part, numeric parts compare as integers and textual parts are ranked
``dev < alpha = a < beta = b < RC = rc < (number) < pl = p``. Any other word
ranks below ``dev``.
"""

import re

DEFAULT_VERSION = "0.0"

_PART_RE = re.compile(r"\d+|[^\d.\-_+]+")

_SPECIAL_FORMS = (
    ("dev", 0),
    ("alpha", 1),
    ("a", 1),
    ("beta", 2),
    ("b", 2),
    ("RC", 3),
    ("rc", 3),
    ("#", 4),
    ("pl", 5),
    ("p", 5),
)
_UNKNOWN_FORM = -6


def image_version(image: str | None) -> str:
    """Return the tag of an image reference ("redis:7.2" -> "7.2").

    The tag is the second colon-separated segment, so "redis:7.2@sha256:ab"
    reports "7.2@sha256". Images without a colon report DEFAULT_VERSION.
    """
    if not image or ":" not in image:
        return DEFAULT_VERSION
    return image.split(":")[1]


def _canonical_parts(version: str) -> list[str]:
    return _PART_RE.findall(version)


def _form_order(part: str) -> int:
    for name, order in _SPECIAL_FORMS:
        if part.startswith(name):
            return order
    return _UNKNOWN_FORM


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _compare_parts(left: str, right: str) -> int:
    if left.isdigit() and right.isdigit():
        return _sign(int(left) - int(right))
    left_order = _form_order("#" if left.isdigit() else left)
    right_order = _form_order("#" if right.isdigit() else right)
    return _sign(left_order - right_order)


def compare_versions(left: str, right: str) -> int:
    """Compare two version strings.

    Returns -1, 0 or 1 like a classic ``cmp``.
    """
    left_parts = _canonical_parts(left)
    right_parts = _canonical_parts(right)

    if not left_parts or not right_parts:
        return _sign(len(left_parts) - len(right_parts))

    for left_part, right_part in zip(left_parts, right_parts):
        result = _compare_parts(left_part, right_part)
        if result:
            return result

    # "1.0.1" > "1.0" but "1.0rc1" < "1.0"
    if len(left_parts) > len(right_parts):
        extra = left_parts[len(right_parts)]
        return 1 if extra.isdigit() else _compare_parts(extra, "#")
    if len(right_parts) > len(left_parts):
        extra = right_parts[len(left_parts)]
        return -1 if extra.isdigit() else _compare_parts("#", extra)
    return 0


def version_at_least(version: str, minimum: str) -> bool:
    """True when ``version`` >= ``minimum``."""
    return compare_versions(version, minimum) >= 0
