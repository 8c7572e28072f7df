"""Deterministic widget identity derived from seeds and the id-stack path."""

from __future__ import annotations

import hashlib
import logging
from collections.abc import Iterator, Sequence
from contextlib import contextmanager

from imcore.api.ids import Seed, WidgetId

_LOG = logging.getLogger("imcore.identity")
_DIGEST_SIZE = 8


def _encode_seed(seed: Seed) -> bytes:
    # Type tags keep "1", 1 and b"1" apart.
    if isinstance(seed, bool):
        raise TypeError("bool is not a valid widget seed")
    if isinstance(seed, WidgetId):
        return b"w" + seed.value.to_bytes(_DIGEST_SIZE, "big")
    if isinstance(seed, str):
        data = seed.encode("utf-8")
        return b"s" + len(data).to_bytes(4, "big") + data
    if isinstance(seed, int):
        text = str(seed).encode("ascii")
        return b"i" + len(text).to_bytes(4, "big") + text
    if isinstance(seed, bytes):
        return b"b" + len(seed).to_bytes(4, "big") + seed
    if isinstance(seed, tuple):
        parts = b"".join(_encode_seed(item) for item in seed)
        return b"t" + len(seed).to_bytes(4, "big") + parts
    raise TypeError(f"unsupported widget seed type: {type(seed).__name__}")


def hash_with_parent(parent: WidgetId, seed: Seed) -> WidgetId:
    """Combine a parent scope id and a seed into a child id."""
    digest = hashlib.blake2b(
        parent.value.to_bytes(_DIGEST_SIZE, "big") + _encode_seed(seed),
        digest_size=_DIGEST_SIZE,
        person=b"imcore.id",
    ).digest()
    return WidgetId(int.from_bytes(digest, "big"))


ROOT_ID = WidgetId(
    int.from_bytes(
        hashlib.blake2b(b"imcore.root", digest_size=_DIGEST_SIZE, person=b"imcore.id").digest(),
        "big",
    )
)


class IdStack:
    """Scope path of ids; the root id is always present and never popped."""

    def __init__(self) -> None:
        self._entries: list[WidgetId] = [ROOT_ID]

    @property
    def depth(self) -> int:
        """Number of pushed scopes above the root."""
        return len(self._entries) - 1

    def top(self) -> WidgetId:
        return self._entries[-1]

    def path(self) -> tuple[WidgetId, ...]:
        return tuple(self._entries)

    def push(self, seed: Seed) -> WidgetId:
        scope_id = hash_with_parent(self.top(), seed)
        self._entries.append(scope_id)
        return scope_id

    def pop(self) -> WidgetId | None:
        """Pop the innermost scope; popping the root is refused and returns None."""
        if len(self._entries) == 1:
            _LOG.warning("id_stack_pop_on_empty")
            return None
        return self._entries.pop()

    def truncate(self, depth: int) -> int:
        """Pop scopes until ``depth`` remain; returns how many were popped."""
        target = max(0, int(depth))
        popped = 0
        while self.depth > target:
            self._entries.pop()
            popped += 1
        return popped

    def reset(self) -> None:
        self._entries = [ROOT_ID]

    @contextmanager
    def scope(self, seed: Seed) -> Iterator[WidgetId]:
        """Push a scope for the duration of a block, popping on every exit path."""
        depth = self.depth
        scope_id = self.push(seed)
        try:
            yield scope_id
        finally:
            self.truncate(depth)


def id_for(seed: Seed, stack: IdStack | Sequence[WidgetId]) -> WidgetId:
    """Pure id derivation: same seed and stack path always yield the same id."""
    if isinstance(stack, IdStack):
        parent = stack.top()
    else:
        parent = stack[-1] if len(stack) else ROOT_ID
    return hash_with_parent(parent, seed)
