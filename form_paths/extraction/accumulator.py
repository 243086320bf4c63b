"""Mutable nested tree that extraction passes fold into."""

from __future__ import annotations

from itertools import pairwise
from typing import Any, Final, override


SlotPath = tuple[str | int, ...]


class _Unset:
    """Placeholder for array slots that were skipped over."""

    _instance: _Unset | None = None

    def __new__(cls) -> _Unset:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    @override
    def __repr__(self) -> str:
        return "UNSET"

    def __copy__(self) -> _Unset:
        return self

    def __deepcopy__(self, memo: dict[int, Any]) -> _Unset:
        return self

    @override
    def __reduce__(self) -> str:
        return "UNSET"


UNSET: Final = _Unset()


def _container_for(step: str | int) -> dict[str, Any] | list[Any]:
    return [] if isinstance(step, int) else {}


def _fits(value: Any, step: str | int) -> bool:
    return isinstance(value, list) if isinstance(step, int) else isinstance(value, dict)


def _has_prefix(path: SlotPath, prefix: SlotPath) -> bool:
    return path[: len(prefix)] == prefix


class Accumulator:
    """Nested ``dict``/``list`` tree plus the slots that hold binary values.

    Create one empty (or around existing data) and pass it to successive
    ``extract`` calls; each call overwrites the slots present in its bag and
    leaves everything else alone. Only one call may mutate an accumulator at a
    time.
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        super().__init__()
        self.data: dict[str, Any] = {} if data is None else data
        self._binary_paths: set[SlotPath] = set()

    @property
    def binary_paths(self) -> frozenset[SlotPath]:
        """Slot paths whose values came from a binary codec."""
        return frozenset(self._binary_paths)

    def _forget_binary(self, prefix: SlotPath, previous: Any) -> None:
        """Drop binary markers at or below ``prefix`` whose slot held ``previous``."""
        if not self._binary_paths:
            return
        if not isinstance(previous, dict | list):
            self._binary_paths.discard(prefix)
            return
        stale = {path for path in self._binary_paths if _has_prefix(path, prefix)}
        if stale:
            self._binary_paths -= stale

    def _child(self, container: Any, step: str | int, next_step: str | int, path: SlotPath) -> Any:
        if isinstance(step, int):
            if len(container) <= step:
                container.extend([UNSET] * (step + 1 - len(container)))
            current = container[step]
        else:
            current = container.get(step, UNSET)

        if not _fits(current, next_step):
            if current is not UNSET:
                self._forget_binary(path, current)
            current = _container_for(next_step)
            container[step] = current
        return current

    def assign(self, path: SlotPath, value: Any, *, binary: bool = False) -> None:
        """Store ``value`` at ``path``, creating containers on the way."""
        if not path or not isinstance(path[0], str):
            msg = f"slot path must start with a key, got {path!r}"
            raise ValueError(msg)

        container: Any = self.data
        for depth, (step, next_step) in enumerate(pairwise(path), start=1):
            container = self._child(container, step, next_step, path[:depth])

        last = path[-1]
        if isinstance(last, int):
            if len(container) <= last:
                container.extend([UNSET] * (last + 1 - len(container)))
            previous = container[last]
        else:
            previous = container.get(last, UNSET)
        container[last] = value

        self._forget_binary(path, previous)
        if binary:
            self._binary_paths.add(path)

    def ensure(self, path: SlotPath, next_step: str | int) -> None:
        """Create missing containers along ``path`` without replacing any value.

        The container at the end of ``path`` is a list when ``next_step`` is an
        index and a dict otherwise.
        """
        if not path:
            return
        container: Any = self.data
        steps = (*path, next_step)
        for step, following in pairwise(steps):
            if isinstance(step, int):
                if len(container) <= step:
                    container.extend([UNSET] * (step + 1 - len(container)))
                current = container[step]
            else:
                current = container.get(step, UNSET)

            if current is UNSET:
                current = _container_for(following)
                container[step] = current
            elif not _fits(current, following):
                return
            container = current

    def get(self, path: SlotPath, default: Any = None) -> Any:
        """Return the value at ``path`` or ``default`` when it is missing."""
        node: Any = self.data
        for step in path:
            try:
                node = node[step]
            except (KeyError, IndexError, TypeError):
                return default
            if node is UNSET:
                return default
        return node

    def view(self, *, binary: bool | None = None) -> dict[str, Any]:
        """Return a detached copy of the tree.

        ``binary=None`` keeps every leaf, ``True`` only binary leaves and
        ``False`` only the others. Filtered-out array items become ``UNSET`` so
        positions are kept; containers emptied by filtering are dropped.
        """
        result, _ = self._copy(self.data, (), binary)
        return result

    def _copy(self, node: Any, path: SlotPath, binary: bool | None) -> tuple[Any, bool]:
        if isinstance(node, dict):
            out: dict[str, Any] = {}
            for key, value in node.items():
                child, kept = self._copy(value, (*path, key), binary)
                if kept:
                    out[key] = child
            return out, bool(out) or self._keeps_empty(node, binary)

        if isinstance(node, list):
            items: list[Any] = []
            any_kept = False
            for index, value in enumerate(node):
                child, kept = self._copy(value, (*path, index), binary)
                items.append(child if kept else UNSET)
                any_kept = any_kept or kept
            if not any_kept:
                return [], self._keeps_empty(node, binary)
            return items, True

        if node is UNSET:
            return UNSET, binary is None
        if binary is None:
            return node, True
        return node, (path in self._binary_paths) == binary

    @staticmethod
    def _keeps_empty(node: dict[str, Any] | list[Any], binary: bool | None) -> bool:
        # Containers that were already empty belong to the text side.
        return not node and binary is not True

    @override
    def __repr__(self) -> str:
        return f"Accumulator({self.data!r})"
