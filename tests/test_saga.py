from __future__ import annotations

import pytest
from kungfu import Ok, Error

from doorstep import lift as L
from doorstep import saga as S


class Journal:
    def __init__(self) -> None:
        self.entries: list[str] = []

    def undo(self, label: str):
        async def compensate(value: object) -> None:
            self.entries.append(f"undo {label}:{value}")
        return compensate


async def test_single_step_success():
    match await S.run(S.step(L.pure(1))):
        case Ok(result):
            assert result.value == 1
            assert result.steps_executed == 1
            assert result.compensators_recorded == 0
        case Error(_):
            pytest.fail("step failed")


async def test_single_step_failure_runs_nothing():
    journal = Journal()
    match await S.run(S.step(L.fail("boom"), compensate=journal.undo("a"))):
        case Error(e):
            assert e.error == "boom"
            assert e.step_failed == 1
            assert e.compensators_run == 0
        case Ok(_):
            pytest.fail("step succeeded")
    assert journal.entries == []


async def test_chain_success_keeps_first_step():
    journal = Journal()
    chain = S.step(L.pure("line"), compensate=journal.undo("drop")).then(
        lambda line: S.step(L.pure(f"{line} removed")),
    )
    match await S.run_chain(chain):
        case Ok(result):
            assert result.value == "line removed"
            assert result.steps_executed == 2
            assert result.compensators_recorded == 1
        case Error(_):
            pytest.fail("chain failed")
    assert journal.entries == []


async def test_chain_failure_compensates_first_step():
    journal = Journal()
    chain = S.step(L.pure("line"), compensate=journal.undo("drop")).then(
        lambda _: S.step(L.fail("server down")),
    )
    match await S.run_chain(chain):
        case Error(e):
            assert e.error == "server down"
            assert e.step_failed == 2
            assert e.compensators_run == 1
            assert e.rollback_complete
        case Ok(_):
            pytest.fail("chain succeeded")
    assert journal.entries == ["undo drop:line"]


async def test_failing_compensator_is_counted_not_raised():
    async def broken(_: object) -> None:
        raise RuntimeError("cannot undo")

    chain = S.step(L.pure(1), compensate=broken).then(lambda _: S.step(L.fail("x")))
    match await S.run_chain(chain):
        case Error(e):
            assert e.compensators_failed == 1
            assert not e.rollback_complete
        case Ok(_):
            pytest.fail("chain succeeded")


async def test_from_async_maps_exceptions():
    async def explode() -> int:
        raise ValueError("bad")

    match await S.run(S.from_async(explode, on_error=lambda exc: str(exc))):
        case Error(e):
            assert e.error == "bad"
        case Ok(_):
            pytest.fail("step succeeded")


async def test_from_async_success():
    async def value() -> int:
        return 7

    match await S.run(S.from_async(value, on_error=str)):
        case Ok(result):
            assert result.value == 7
        case Error(_):
            pytest.fail("step failed")
