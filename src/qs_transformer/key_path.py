"""Bracket key-path grammar and percent-escaping helpers shared by both codecs."""

from typing import Callable, List, Optional, Tuple, Union
from urllib.parse import quote, unquote


APPEND = "[]"

# encodeURIComponent leaves these unescaped (letters, digits, "-_.~" are always
# safe for quote); brackets stay literal so key paths remain readable.
_SAFE_CHARS = "!*'()[]"

EscapeFunction = Callable[[Union[str, int, float]], str]


def default_escape(value: Union[str, int, float]) -> str:
    """Percent-encode a key or scalar value for use inside a query string."""
    if not isinstance(value, str):
        value = str(value)
    return quote(value, safe=_SAFE_CHARS)


def default_unescape(text: str) -> str:
    """Percent-decode text; malformed escapes are kept as literal characters."""
    return unquote(text, errors="replace")


def child_key(prefix: str, name: str) -> str:
    """Key of a named child under ``prefix`` (``a`` + ``b`` -> ``a[b]``)."""
    if prefix:
        return f"{prefix}[{name}]"
    return name


def append_key(prefix: str) -> str:
    """Key used for every element of a sequence stored under ``prefix``."""
    return prefix + APPEND


def find_pair_boundary(pair: str) -> int:
    """
    Locate the ``=`` separating key from value in a decoded pair.

    The first ``=`` outside a ``[...]`` span wins. Bracket depth is a single
    flag: ``[`` sets it and ``]`` clears it, so nesting is not counted. When
    every ``=`` sits inside brackets the first one is used.

    Args:
        pair: Decoded ``key=value`` text

    Returns:
        Index of the boundary, or -1 if the pair has no ``=`` at all
    """
    inside = False
    for index, char in enumerate(pair):
        if char == "]":
            inside = False
        elif char == "[":
            inside = True
        elif char == "=" and not inside:
            return index
    return pair.find("=")


def split_pair(pair: str) -> Tuple[str, str]:
    """
    Split a decoded pair into key and value.

    A pair without a usable key (no ``=`` or a leading ``=``) is a bare flag:
    the whole pair becomes the key and the value is empty.
    """
    boundary = find_pair_boundary(pair)
    if boundary <= 0:
        return pair, ""
    return pair[:boundary], pair[boundary + 1:]


def parse_key_path(key: str) -> Optional[List[str]]:
    """
    Split a bracketed key into its path segments.

    ``a[b][]`` becomes ``["a", "b", "[]"]``. Each piece between ``[`` is read
    up to its first ``]``. An empty name right before ``]`` is the append
    marker and terminates the path; an empty piece with no ``]`` terminates
    it as well. Text after a piece's ``]`` is ignored.

    Args:
        key: Decoded key text

    Returns:
        Path segments, or None when the key has no leading named segment
    """
    path: List[str] = []

    for piece in key.split("["):
        closed = "]" in piece
        name = piece[:piece.index("]")] if closed else piece

        if name == "":
            if closed and path:
                path.append(APPEND)
            break

        path.append(name)

    return path or None
