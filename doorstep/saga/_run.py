"""
Saga execution with rollback.
"""

from __future__ import annotations

import logging

from kungfu import Result, Ok, Error

from doorstep.saga._types import (
    SagaStep,
    SagaResult,
    SagaError,
    Then,
    CompensatorWithValue,
)

logger = logging.getLogger(__name__)

type RecordedCompensator[T] = tuple[T, CompensatorWithValue[T]]

# ═══════════════════════════════════════════════════════════════════════════════
# Internals
# ═══════════════════════════════════════════════════════════════════════════════


async def run_step[T, E](
    step: SagaStep[T, E],
    compensators: list[RecordedCompensator[T]],
) -> Result[T, E]:
    """Execute a single step, recording its compensator on success."""
    result = await step.action
    match result:
        case Ok(value):
            if step.compensate is not None:
                compensators.append((value, step.compensate))
            return Ok(value)
        case Error(e):
            return Error(e)


async def run_compensators[T](
    compensators: list[RecordedCompensator[T]],
) -> tuple[int, int]:
    """Run compensators newest first. Returns (run, failed); never raises."""
    comp_run = 0
    comp_failed = 0

    for value, comp in reversed(compensators):
        try:
            await comp(value)
            comp_run += 1
        except Exception:
            logger.exception("Compensation failed for %r", value)
            comp_failed += 1

    return comp_run, comp_failed


# ═══════════════════════════════════════════════════════════════════════════════
# run() — Single Step
# ═══════════════════════════════════════════════════════════════════════════════


async def run[T, E](
    saga: SagaStep[T, E],
) -> Result[SagaResult[T], SagaError[E]]:
    """
    Execute one step.

    A lone step has nothing before it to undo, so a failure reports zero
    compensators run.
    """
    compensators: list[RecordedCompensator[T]] = []

    match await run_step(saga, compensators):
        case Ok(value):
            return Ok(SagaResult(
                value=value,
                steps_executed=1,
                compensators_recorded=len(compensators),
            ))
        case Error(error):
            return Error(SagaError(
                error=error,
                step_failed=1,
                compensators_run=0,
                compensators_failed=0,
            ))


# ═══════════════════════════════════════════════════════════════════════════════
# run_chain() — Step, then Step
# ═══════════════════════════════════════════════════════════════════════════════


async def run_chain[T, U, E, E2](
    chain: Then[T, U, E, E2],
) -> Result[SagaResult[U], SagaError[E | E2]]:
    """
    Execute two chained steps.

    If the second step fails, the first step's compensator runs.

    Example:
        match await S.run_chain(optimistic_remove):
            case Ok(r):
                ...
            case Error(e) if not e.rollback_complete:
                ...
    """
    compensators_t: list[RecordedCompensator[T]] = []
    compensators_u: list[RecordedCompensator[U]] = []

    match await run_step(chain.inner, compensators_t):
        case Error(e):
            return Error(SagaError(
                error=e,
                step_failed=1,
                compensators_run=0,
                compensators_failed=0,
            ))
        case Ok(value):
            next_step = chain.f(value)

    match await run_step(next_step, compensators_u):
        case Ok(final_value):
            return Ok(SagaResult(
                value=final_value,
                steps_executed=2,
                compensators_recorded=len(compensators_t) + len(compensators_u),
            ))
        case Error(e):
            logger.info("Step 2 failed, rolling back %d step(s)", len(compensators_t))
            comp_run, comp_failed = await run_compensators(compensators_t)
            return Error(SagaError(
                error=e,
                step_failed=2,
                compensators_run=comp_run,
                compensators_failed=comp_failed,
            ))


__all__ = ("run", "run_chain")
