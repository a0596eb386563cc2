"""Open-addressing hash table keyed by strings, with linear probing."""

from __future__ import annotations

from collections.abc import Iterator, MutableMapping
from typing import Any

DEFAULT_CAPACITY = 2000

_MASK = (1 << 64) - 1


def hash_key(key: str, capacity: int) -> int:
    """Return the bucket index of ``key`` in a table of ``capacity`` buckets.

    The hash ignores ASCII case, so keys differing only in case share a bucket.
    """
    if not isinstance(key, str):
        raise TypeError(f"keys must be str, not {type(key).__name__}")
    if capacity < 1:
        raise ValueError("capacity must be positive")
    value = 0
    for byte in key.encode("utf-8"):
        if 65 <= byte <= 90:
            byte += 32
        elif byte >= 128:
            byte -= 256
        value = (value * 33 + byte) & _MASK
    return value % capacity


class _Slot:
    __slots__ = ("key", "value")

    def __init__(self, key: str | None, value: Any) -> None:
        self.key = key
        self.value = value


class HashMap(MutableMapping):
    """String-keyed mapping that iterates in bucket order.

    Deleted entries leave a tombstone behind, so probing chains stay intact.
    The table doubles its capacity when it is full.
    """

    def __init__(self, capacity: int = DEFAULT_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError("capacity must be positive")
        self._buckets: list[_Slot | None] = [None] * capacity
        self._size = 0

    @property
    def capacity(self) -> int:
        """Number of buckets currently allocated."""
        return len(self._buckets)

    def _find(self, key: str) -> int | None:
        capacity = self.capacity
        index = hash_key(key, capacity)
        for _ in range(capacity):
            slot = self._buckets[index]
            if slot is None:
                return None
            if slot.key is not None and slot.key == key:
                return index
            index = (index + 1) % capacity
        return None

    def _free_index(self, key: str) -> int | None:
        capacity = self.capacity
        index = hash_key(key, capacity)
        for _ in range(capacity):
            if self._buckets[index] is None:
                return index
            index = (index + 1) % capacity
        return None

    def _place(self, key: str, value: Any) -> None:
        if self._size == self.capacity:
            self._enlarge()
        index = self._free_index(key)
        if index is None:
            # Every bucket holds a live entry or a tombstone; rehashing drops the tombstones.
            self._enlarge()
            index = self._free_index(key)
        self._buckets[index] = _Slot(key, value)
        self._size += 1

    def _enlarge(self) -> None:
        old = self._buckets
        self._buckets = [None] * (len(old) * 2)
        self._size = 0
        for slot in old:
            if slot is not None and slot.key is not None:
                self._place(slot.key, slot.value)

    def insert(self, key: str, value: Any) -> bool:
        """Add ``key`` unless it is already present; return whether it was added."""
        if self._find(key) is not None:
            return False
        self._place(key, value)
        return True

    def __getitem__(self, key: str) -> Any:
        index = self._find(key)
        if index is None:
            raise KeyError(key)
        return self._buckets[index].value

    def __setitem__(self, key: str, value: Any) -> None:
        index = self._find(key)
        if index is None:
            self._place(key, value)
        else:
            self._buckets[index].value = value

    def __delitem__(self, key: str) -> None:
        index = self._find(key)
        if index is None:
            raise KeyError(key)
        self._buckets[index].key = None
        self._buckets[index].value = None
        self._size -= 1

    def __iter__(self) -> Iterator[str]:
        keys = [slot.key for slot in self._buckets if slot is not None and slot.key is not None]
        return iter(keys)

    def __len__(self) -> int:
        return self._size

    def clear(self) -> None:
        """Remove every entry, keeping the current capacity."""
        self._buckets = [None] * self.capacity
        self._size = 0

    def __repr__(self) -> str:
        items = ", ".join(f"{key!r}: {value!r}" for key, value in self.items())
        return f"{type(self).__name__}({{{items}}})"