"""the beautiful world start from here."""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Iterable, Mapping, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")

ELLIPSIS = "…"


def basename(path: str | None) -> str:
    """
    Last path segment of a repository path.

    Example
    -------
    'src/app/main.py' → 'main.py'
    """
    if not path:
        return ""
    return path.rstrip("/").rsplit("/", 1)[-1]


def truncate(text: str, limit: int) -> str:
    """Cut ``text`` to at most ``limit`` characters, marking the cut with an ellipsis."""
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def batched(items: Sequence[T], size: int) -> Iterable[Sequence[T]]:
    """Yield consecutive slices of ``items`` of at most ``size`` elements."""
    if size < 1:
        raise ValueError("batch size must be >= 1")
    for start in range(0, len(items), size):
        yield items[start : start + size]


async def gather_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    *,
    batch_size: int,
) -> list[R]:
    """
    Run ``worker`` over ``items`` with bounded concurrency.

    Batches run strictly one after another; inside a batch every call is
    in flight at once, so at most ``batch_size`` calls are outstanding.
    Results keep the order of ``items``. ``worker`` is expected to absorb
    its own failures; an exception escaping it propagates to the caller.
    """
    results: list[R] = []
    for batch in batched(items, batch_size):
        results.extend(await asyncio.gather(*(worker(item) for item in batch)))
    return results


def dig(data: Any, path: Sequence[str]) -> Any:
    """Walk nested mappings along ``path``; ``None`` as soon as a step is missing."""
    current = data
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
        if current is None:
            return None
    return current


def as_int(value: Any) -> int:
    """Coerce a JSON number to ``int``; anything else counts as 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    return 0
