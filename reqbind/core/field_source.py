"""Field Sources — per-request ordered multimaps the walker reads from.

Invariants:
    - Key order and per-key value order follow the order pairs were added
    - lookup() tries the exact key first, then the first key equal under casefold()
    - FileSource is only ever built from multipart bodies
"""

from collections.abc import Iterable, Iterator, Mapping
from typing import Generic, TypeVar

from starlette.datastructures import UploadFile

V = TypeVar("V")


class _MultiSource(Mapping, Generic[V]):
    """Ordered name → values multimap with case-insensitive fallback lookup."""

    def __init__(self, pairs: Iterable[tuple[str, V]] = ()):
        self._data: dict[str, list[V]] = {}
        for name, value in pairs:
            self.add(name, value)

    def add(self, name: str, value: V) -> None:
        self._data.setdefault(name, []).append(value)

    def replace(self, name: str, value: V) -> None:
        self._data[name] = [value]

    def __getitem__(self, name: str) -> list[V]:
        return self._data[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._data!r})"

    def lookup(self, name: str) -> list[V] | None:
        """Values for name: exact match, else case-insensitive match, else None."""
        values = self._data.get(name)
        if values is not None:
            return values
        folded = name.casefold()
        for key, candidate in self._data.items():
            if key.casefold() == folded:
                return candidate
        return None


class FieldSource(_MultiSource[str]):
    """External field name → ordered string values."""


class FileSource(_MultiSource[UploadFile]):
    """External field name → ordered uploaded-file handles."""


class ValuesMap(dict[str, list[str]]):
    """Map destination that keeps every value per key (a plain dict keeps the first)."""
