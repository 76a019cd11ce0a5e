"""Bracket-aware decoder turning query strings into nested mappings."""

from typing import Any, Callable, Dict, List, Optional
from .key_path import APPEND, default_unescape, parse_key_path, split_pair


PAIR_SEPARATOR = "&"


class QueryStringDecoder:
    """
    Decoder for ``key=value`` pairs with bracketed key paths.

    Repeated plain keys coalesce into lists, ``key[]`` appends to a list and
    ``key[child]`` descends into nested mappings. Decoding never fails; any
    input produces a mapping.
    """

    def __init__(self, unescape: Optional[Callable[[str], str]] = None):
        """
        Initialize the decoder.

        Args:
            unescape: Percent-decoding function applied to each raw pair
        """
        self.unescape = unescape or default_unescape

    def decode(self, query_string: Any) -> Dict[str, Any]:
        """
        Decode a query string.

        Args:
            query_string: Query string text; None, bytes and other objects are coerced

        Returns:
            Mapping of keys to strings, lists of strings or nested mappings
        """
        result: Dict[str, Any] = {}

        for raw_pair in self.coerce(query_string).split(PAIR_SEPARATOR):
            if not raw_pair:
                continue

            pair = self.unescape(raw_pair.replace("+", " "))
            key, value = split_pair(pair)

            path = parse_key_path(key) if "]" in key else None
            if path:
                self._deposit(result, path, value)
            else:
                self._assign(result, key, value)

        return result

    @staticmethod
    def coerce(query_string: Any) -> str:
        """Coerce decoder input to text."""
        if query_string is None:
            return ""
        if isinstance(query_string, bytes):
            return query_string.decode("utf-8", errors="replace")
        return str(query_string)

    @staticmethod
    def _assign(container: Dict[str, Any], key: str, value: str) -> None:
        """Set ``key``, turning repeated keys into a list of values."""
        if key not in container:
            container[key] = value
        elif isinstance(container[key], list):
            container[key].append(value)
        else:
            container[key] = [container[key], value]

    @staticmethod
    def _deposit(result: Dict[str, Any], path: List[str], value: str) -> None:
        """Walk ``path`` from the root, creating containers as needed."""
        append = path[-1] == APPEND
        names = path[:-1] if append else path

        container = result
        for name in names[:-1]:
            child = container.get(name)
            if not isinstance(child, dict):
                child = container[name] = {}
            container = child

        leaf = names[-1]
        if not append:
            container[leaf] = value
            return

        items = container.get(leaf)
        if not isinstance(items, list):
            items = container[leaf] = []
        if value:
            items.append(value)


def parse(query_string: Any) -> Dict[str, Any]:
    """
    Parse a query string into a nested mapping.

    >>> parse("a[b][]=x&a[b][]=y&c=1&c=2")
    {'a': {'b': ['x', 'y']}, 'c': ['1', '2']}
    """
    return QueryStringDecoder().decode(query_string)
