"""WeakTable: a mapping whose keys and/or values may be reclaimed by the collector.

Which side is held weakly is the table's *mode*: ``"k"`` (keys), ``"v"``
(values), ``"kv"`` (both) or ``None`` (an ordinary table that only carries the
wrapper). Objects that cannot be weakly referenced (``int``, ``str``,
``tuple``...) are always stored strongly, whatever the mode.

Entries can disappear between any two observations. Every read goes through
one of two paths:

* :meth:`WeakTable.snapshot`, an atomic strong copy taken under the table
  lock. Iteration and the views are built on it.
* :meth:`WeakTable.count_live`, a direct walk of the storage that only
  counts. It is not tied to any snapshot, so two calls can disagree with no
  mutation by the caller.
"""
from __future__ import annotations

import threading
import weakref
from collections.abc import Iterator, Mapping, MutableMapping
from typing import Any, TypeVar

from weaktables.constants import MODE_WEAK_BOTH, MODE_WEAK_KEYS, MODE_WEAK_VALUES, WeakMode
from weaktables.validation import ensure_initial, ensure_mode

K = TypeVar("K")
V = TypeVar("V")


class _KeyRef(weakref.ref):
    __slots__ = ()


class _ValueRef(weakref.ref):
    """Weak value that remembers the storage key it was filed under."""

    __slots__ = ("key",)

    def __new__(cls, value: Any, callback: Any, key: Any) -> _ValueRef:
        self = super().__new__(cls, value, callback)
        self.key = key
        return self

    def __init__(self, value: Any, callback: Any, key: Any) -> None:
        super().__init__(value, callback)


def _referenceable(obj: object) -> bool:
    try:
        weakref.ref(obj)
    except TypeError:
        return False
    return True


def _resolve(stored: Any, ref_type: type[weakref.ref]) -> Any:
    if isinstance(stored, ref_type):
        return stored()
    return stored


class WeakTable(MutableMapping[K, V]):
    def __init__(
        self,
        mode: WeakMode | None = None,
        initial: Mapping[K, V] | None = None,
        *,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self._mode: WeakMode | None = None if mode is None else ensure_mode(mode, "WeakTable")
        source = ensure_initial(initial, "WeakTable")
        self._data: dict[Any, Any] = {}
        self._lock = threading.Lock()
        self._pending_removals: list[weakref.ref] = []
        self.metadata: dict[str, Any] = dict(metadata or {})

        def _on_collect(ref: weakref.ref, selfref: weakref.ref = weakref.ref(self)) -> None:
            table = selfref()
            if table is None:
                return
            table._pending_removals.append(ref)
            # The collector may run inside a locked section of this very
            # thread; in that case the removal waits for the next locked call.
            released: list[Any] = []
            if table._lock.acquire(blocking=False):
                try:
                    table._purge(released)
                finally:
                    table._lock.release()

        self._on_collect = _on_collect
        if source is not None:
            for key, value in source.items():
                self[key] = value

    @property
    def mode(self) -> WeakMode | None:
        return self._mode

    @property
    def weak_keys(self) -> bool:
        return self._mode in (MODE_WEAK_KEYS, MODE_WEAK_BOTH)

    @property
    def weak_values(self) -> bool:
        return self._mode in (MODE_WEAK_VALUES, MODE_WEAK_BOTH)

    # -- storage (callers hold self._lock) ---------------------------------
    #
    # Whatever leaves the storage goes into the caller's `released` list and
    # is only dropped once the lock is free: finalizers of stored objects may
    # touch this table again.

    def _purge(self, released: list[Any]) -> None:
        while self._pending_removals:
            ref = self._pending_removals.pop()
            if isinstance(ref, _ValueRef):
                if self._data.get(ref.key) is ref:
                    released.append(self._data.pop(ref.key))
            else:
                released.append(self._data.pop(ref, None))

    def _lookup_key(self, key: Any) -> Any:
        if self.weak_keys and _referenceable(key):
            return weakref.ref(key)
        return key

    def _store(self, key: Any, value: Any, released: list[Any]) -> None:
        if self.weak_keys and _referenceable(key):
            slot: Any = _KeyRef(key, self._on_collect)
        else:
            slot = key
        released.append(self._data.get(slot))
        if self.weak_values and _referenceable(value):
            self._data[slot] = _ValueRef(value, self._on_collect, slot)
        else:
            self._data[slot] = value

    def _live_items(self) -> Iterator[tuple[Any, Any]]:
        for slot, stored in self._data.items():
            key = _resolve(slot, _KeyRef)
            value = _resolve(stored, _ValueRef)
            if key is None or value is None:
                continue
            yield key, value

    def _apply_mode(self, mode: WeakMode | None) -> None:
        released: list[Any] = []
        with self._lock:
            self._purge(released)
            live = list(self._live_items())
            released.append(self._data)
            self._mode = mode
            self._data = {}
            self._pending_removals.clear()
            for key, value in live:
                self._store(key, value, released)

    # -- read paths ---------------------------------------------------------

    def snapshot(self) -> dict[K, V]:
        """Strong copy of every entry that is alive at the moment of the copy."""
        released: list[Any] = []
        with self._lock:
            self._purge(released)
            return dict(self._live_items())

    def count_live(self) -> int:
        released: list[Any] = []
        with self._lock:
            self._purge(released)
            total = 0
            for slot, stored in self._data.items():
                if isinstance(slot, _KeyRef) and slot() is None:
                    continue
                if isinstance(stored, _ValueRef) and stored() is None:
                    continue
                total += 1
            return total

    # -- mapping protocol ---------------------------------------------------

    def __getitem__(self, key: K) -> V:
        if key is None:
            raise KeyError(key)
        released: list[Any] = []
        with self._lock:
            self._purge(released)
            try:
                stored = self._data[self._lookup_key(key)]
            except KeyError:
                raise KeyError(key) from None
            value = _resolve(stored, _ValueRef)
        if value is None:
            raise KeyError(key)
        return value

    def __setitem__(self, key: K, value: V) -> None:
        if key is None:
            return
        released: list[Any] = []
        with self._lock:
            self._purge(released)
            if value is None:
                released.append(self._data.pop(self._lookup_key(key), None))
            else:
                self._store(key, value, released)

    def __delitem__(self, key: K) -> None:
        if key is None:
            raise KeyError(key)
        released: list[Any] = []
        with self._lock:
            self._purge(released)
            try:
                released.append(self._data.pop(self._lookup_key(key)))
            except KeyError:
                raise KeyError(key) from None

    def __contains__(self, key: object) -> bool:
        try:
            self[key]  # type: ignore[index]
        except KeyError:
            return False
        return True

    def __iter__(self) -> Iterator[K]:
        return iter(self.snapshot())

    def __len__(self) -> int:
        return self.count_live()

    def keys(self):  # type: ignore[override]
        return self.snapshot().keys()

    def values(self):  # type: ignore[override]
        return self.snapshot().values()

    def items(self):  # type: ignore[override]
        return self.snapshot().items()

    def clear(self) -> None:
        released: list[Any] = []
        with self._lock:
            released.append(self._data)
            self._data = {}
            self._pending_removals.clear()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(mode={self._mode!r}, entries={self.count_live()})"


WeakKeysTable = WeakTable
WeakValuesTable = WeakTable
WeakBothTable = WeakTable


__all__ = [
    "WeakBothTable",
    "WeakKeysTable",
    "WeakTable",
    "WeakValuesTable",
]
