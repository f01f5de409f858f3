"""
Saga types — compensated steps and their outcomes.
"""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable, Awaitable
from kungfu import LazyCoroResult

# ═══════════════════════════════════════════════════════════════════════════════
# Compensator — Undo Action
# ═══════════════════════════════════════════════════════════════════════════════

type CompensatorWithValue[T] = Callable[[T], Awaitable[None]]
"""Receives the step's result and undoes it (e.g. restores a cart line)."""

# ═══════════════════════════════════════════════════════════════════════════════
# SagaStep — Single Step with Compensation
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaStep[T, E]:
    """
    A single step: action + compensator.

    When the action succeeds its compensator is recorded; if a later step
    fails, recorded compensators run in reverse order.
    """

    action: LazyCoroResult[T, E]
    compensate: CompensatorWithValue[T] | None

    def then[U, E2](
        self,
        f: Callable[[T], SagaStep[U, E2]],
    ) -> Then[T, U, E, E2]:
        """Chain another step after this one."""
        return Then(self, f)


@dataclass(frozen=True, slots=True)
class Then[T, U, E, E2]:
    """Sequential composition."""

    inner: SagaStep[T, E]
    f: Callable[[T], SagaStep[U, E2]]


# ═══════════════════════════════════════════════════════════════════════════════
# Result Types
# ═══════════════════════════════════════════════════════════════════════════════


@dataclass(frozen=True, slots=True)
class SagaResult[T]:
    value: T
    steps_executed: int
    compensators_recorded: int


@dataclass(frozen=True, slots=True)
class SagaError[E]:
    """Failure of one step plus how the rollback went."""

    error: E
    step_failed: int
    compensators_run: int
    compensators_failed: int

    @property
    def rollback_complete(self) -> bool:
        return self.compensators_failed == 0


__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "Then",
    "SagaResult",
    "SagaError",
)
