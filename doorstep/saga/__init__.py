"""
Saga — compensated async steps.

    from doorstep import saga as S

    chain = S.step(local_change, undo).then(lambda v: S.step(remote_call(v)))
    result = await S.run_chain(chain)
"""

from __future__ import annotations

from doorstep.saga._types import (
    CompensatorWithValue,
    SagaStep,
    SagaResult,
    SagaError,
    Then,
)
from doorstep.saga._step import step, from_async
from doorstep.saga._run import run, run_chain

__all__ = (
    "CompensatorWithValue",
    "SagaStep",
    "SagaResult",
    "SagaError",
    "Then",
    "step",
    "from_async",
    "run",
    "run_chain",
)
