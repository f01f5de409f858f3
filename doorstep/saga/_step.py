"""
Saga step creation.
"""

from __future__ import annotations

from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult

from doorstep import lift as L
from doorstep.saga._types import SagaStep, CompensatorWithValue


def step[T, E](
    action: LazyCoroResult[T, E],
    compensate: CompensatorWithValue[T] | None = None,
) -> SagaStep[T, E]:
    """
    Create a compensated step.

    Example:
        from doorstep import saga as S

        drop = S.step(
            action=L.pure(removed_line),
            compensate=lambda line: restore(line),
        )
        remote = drop.then(lambda line: S.step(
            action=backend.remove_from_cart(line.sub_service_id),
        ))
    """
    return SagaStep(action=action, compensate=compensate)


def from_async[T, E](
    action: Callable[[], Awaitable[T]],
    on_error: Callable[[Exception], E],
    compensate: CompensatorWithValue[T] | None = None,
) -> SagaStep[T, E]:
    """Create a step from a plain async callable; exceptions map through on_error."""
    return SagaStep(
        action=L.catching_async(action, on_error=on_error),
        compensate=compensate,
    )


__all__ = ("step", "from_async")
