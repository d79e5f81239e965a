"""
RouteTable - the immutable product of compilation.

Entries keep compilation order, duplicates included. Lookup by verb and
path returns the entry compiled last for that pair, so a later
registration shadows an earlier one.
"""

from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple, Union

from .compiler import RouteEntry
from .decorators import HttpMethod
from .errors import RouteNotFoundError


class RouteTable:
    """
    Ordered, read-only collection of compiled routes.

    Example:
        >>> table = RouteTable(entries)
        >>> table.lookup("GET", "/users/").method_name
        'getAllUsers'
        >>> table.dispatch("GET", "/users/")
    """

    __slots__ = ("_entries", "_index")

    def __init__(self, entries: Iterable[RouteEntry] = ()):
        self._entries: Tuple[RouteEntry, ...] = tuple(entries)
        self._index: Dict[Tuple[HttpMethod, str], RouteEntry] = {}
        for entry in self._entries:
            self._index[entry.key] = entry

    @property
    def entries(self) -> Tuple[RouteEntry, ...]:
        return self._entries

    def lookup(self, verb: Union[HttpMethod, str], path: str) -> Optional[RouteEntry]:
        """Entry registered last for ``(verb, path)``, or None."""
        try:
            method = HttpMethod.coerce(verb)
        except ValueError:
            return None
        return self._index.get((method, path))

    def dispatch(self, verb: Union[HttpMethod, str], path: str, *args: Any, **kwargs: Any) -> Any:
        """
        Invoke the handler for ``(verb, path)`` and return its result.

        Raises:
            RouteNotFoundError: If no route matches
        """
        entry = self.lookup(verb, path)
        if entry is None:
            raise RouteNotFoundError(verb, path)
        return entry.handler(*args, **kwargs)

    def duplicates(self) -> Dict[Tuple[HttpMethod, str], List[RouteEntry]]:
        """Pairs compiled more than once, with every entry in compilation order."""
        grouped: Dict[Tuple[HttpMethod, str], List[RouteEntry]] = {}
        for entry in self._entries:
            grouped.setdefault(entry.key, []).append(entry)
        return {key: group for key, group in grouped.items() if len(group) > 1}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "routes": [entry.to_dict() for entry in self._entries],
            "total_routes": len(self._entries),
            "shadowed": [
                {"method": verb.value, "path": path, "count": len(group)}
                for (verb, path), group in self.duplicates().items()
            ],
        }

    def __iter__(self) -> Iterator[RouteEntry]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __getitem__(self, index: int) -> RouteEntry:
        return self._entries[index]

    def __contains__(self, key: Any) -> bool:
        if isinstance(key, tuple) and len(key) == 2:
            return self.lookup(*key) is not None
        return False

    def __repr__(self) -> str:
        return f"RouteTable(routes={len(self._entries)})"
