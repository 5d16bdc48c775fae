"""
Optimistic mutation helper.

A mutation patches the interaction store immediately, then awaits the
remote write. On success the server's value is written back; on failure
the store is restored to its pre-mutation snapshot. Both happen whether
or not the caller is still around to show the result, since other
sessions read the same store. There is no retry.
"""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from rex_core import get_logger

from .store import InteractionStore

logger = get_logger(__name__)

T = TypeVar("T")


class MutationStatus(str, Enum):
    """Lifecycle of one optimistic mutation."""

    PENDING = "pending"
    COMMITTED = "committed"
    ROLLED_BACK = "rolledBack"


@dataclass
class MutationResult(Generic[T]):
    """Outcome of an optimistic mutation."""

    status: MutationStatus = MutationStatus.PENDING
    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.status is MutationStatus.COMMITTED


async def run_optimistic(
    store: InteractionStore,
    thing_id: str,
    apply: Callable[[], None],
    remote: Callable[[], Awaitable[T]],
    on_commit: Callable[[T], None] | None = None,
    result: MutationResult[T] | None = None,
) -> MutationResult[T]:
    """
    Run one optimistic mutation against ``store``.

    Args:
        store: Interaction store to patch.
        thing_id: Thing whose entries the mutation touches (rollback scope).
        apply: Synchronous local patch.
        remote: Coroutine factory performing the remote write.
        on_commit: Writes the server's value back into the store.
        result: Pre-created result to fill in, so callers can observe the
            pending state.

    Returns:
        The committed or rolled-back result. Remote errors are never raised.
    """
    result = result if result is not None else MutationResult()
    result.status = MutationStatus.PENDING

    snapshot = store.snapshot(thing_id)
    apply()

    try:
        value = await remote()
    except Exception as e:
        logger.warning(
            "Remote write failed; reverting optimistic update",
            extra={"thing_id": thing_id, "error": str(e)},
        )
        result.status = MutationStatus.ROLLED_BACK
        result.error = e
        store.restore(snapshot)
        result.value = None
        return result

    result.status = MutationStatus.COMMITTED
    result.value = value
    if on_commit is not None:
        on_commit(value)
    return result
