"""Ordered container for gallery field values."""

from typing import Any, Generic, Iterable, Iterator, List, Optional, Protocol, TypeVar


class Mappable(Protocol):
    def to_map(self) -> Any: ...


T = TypeVar("T", bound=Mappable)


class Gallery(Generic[T]):
    """
    A gallery value: an ordered sequence of uploads.

    Empty slots (None or other falsy values) are kept in the sequence so
    positions survive a round trip, but are dropped when the gallery is
    projected into the payload shape with to_map().
    """

    def __init__(self, items: Optional[Iterable[Optional[T]]] = None):
        self._items: List[Optional[T]] = list(items or [])

    def append(self, item: Optional[T]) -> None:
        self._items.append(item)

    def __iter__(self) -> Iterator[Optional[T]]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Optional[T]:
        return self._items[index]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Gallery):
            return NotImplemented
        return self._items == other._items

    def __repr__(self) -> str:
        return f"Gallery({self._items!r})"

    def to_map(self) -> List[Any]:
        """Project every non-empty item through its own to_map()."""
        return [item.to_map() for item in self._items if item]
