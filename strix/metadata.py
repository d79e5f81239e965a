"""
Metadata store - declarative facts attached to classes and functions.

Every fact is a ``(subject, key, value)`` record. Subjects are compared by
identity, never by value: two equal-looking functions are two subjects.
"""

from typing import Any, Dict, Iterator, Tuple


# Keys written by the annotation layer
BASE_PATH = "basePath"
INJECTABLE = "injectable"
MODULE_METADATA = "module:metadata"
METHOD = "method"
PATH = "path"
PARAMTYPES = "paramtypes"


class _Absent:
    """Sentinel type for missing metadata."""

    __slots__ = ()

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


class MetadataStore:
    """
    In-memory associative store keyed by ``(subject, key)``.

    At most one value is held per pair; a second ``set`` overwrites the
    first. Subjects are held by strong reference so their identity stays
    valid for the lifetime of the store.

    Example:
        >>> store = MetadataStore()
        >>> store.set(UserController, BASE_PATH, "/users")
        >>> store.get(UserController, BASE_PATH)
        '/users'
        >>> store.get(UserController, INJECTABLE) is ABSENT
        True
    """

    __slots__ = ("_records",)

    def __init__(self):
        # {(id(subject), key): (subject, value)}
        self._records: Dict[Tuple[int, str], Tuple[Any, Any]] = {}

    def set(self, subject: Any, key: str, value: Any) -> None:
        self._records[(id(subject), key)] = (subject, value)

    def get(self, subject: Any, key: str, default: Any = ABSENT) -> Any:
        record = self._records.get((id(subject), key))
        if record is None or record[0] is not subject:
            return default
        return record[1]

    def has(self, subject: Any, key: str) -> bool:
        return self.get(subject, key) is not ABSENT

    def records(self) -> Iterator[Tuple[Any, str, Any]]:
        """Iterate ``(subject, key, value)`` triples in insertion order."""
        for (_, key), (subject, value) in self._records.items():
            yield subject, key, value

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"MetadataStore(records={len(self._records)})"


# Process-wide store used by the module-level decorators
default_store = MetadataStore()
