"""Sequential step runner for the store orchestrators.

An orchestrator is a table of ``Step``s run in order against one mutable run
state. The first ``Err`` stops the run. Each step declares its ``Effect``:

- NONE: reads or checks only
- SCRATCH: writes only to temporary install paths, undone by ``on_abort``
- DURABLE: changes the store; nothing after it is undone

``on_abort`` runs once a SCRATCH step has started and only while no DURABLE
step has completed.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import Generic, TypeVar

from shelf.core.errors import ShelfError
from shelf.core.result import Err, Ok, Result

__all__ = ["Effect", "Step", "StepOutcome", "CONTINUE", "FINISH", "run_steps"]

S = TypeVar("S")


class Effect(Enum):
    NONE = auto()
    SCRATCH = auto()
    DURABLE = auto()


class StepOutcome(Enum):
    CONTINUE = auto()
    FINISH = auto()


CONTINUE = StepOutcome.CONTINUE
FINISH = StepOutcome.FINISH


@dataclass(frozen=True, slots=True)
class Step(Generic[S]):
    name: str
    run: Callable[[S], Result[StepOutcome, ShelfError]]
    effect: Effect = Effect.NONE


def run_steps(
    steps: Sequence[Step[S]],
    state: S,
    *,
    on_abort: Callable[[S], None] | None = None,
) -> Result[None, ShelfError]:
    """Run ``steps`` in order until one fails or returns FINISH.

    Returns:
        Ok(None) when all steps ran or one finished early, otherwise the
        failing step's Err unchanged
    """
    scratch = False
    durable = False
    for step in steps:
        if step.effect is Effect.SCRATCH:
            scratch = True
        outcome = step.run(state)
        if isinstance(outcome, Err):
            if on_abort is not None and scratch and not durable:
                on_abort(state)
            return outcome
        if step.effect is Effect.DURABLE:
            durable = True
        if outcome.value is FINISH:
            break
    return Ok(None)
