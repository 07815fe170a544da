"""
Turtle interpretation of an expanded L-system sequence.

The turtle walks the symbols left to right:

- draw symbol (F by default) : move forward one step, line_to + stroke
- '+'                        : heading -= angle
- '-'                        : heading += angle
- '['                        : push (position, heading) on the branch stack
- ']'                        : pop it back and move_to the restored point
- anything else              : ignored

Drawing goes through a sink (see draw_sinks) so the same walk feeds an image,
a tkinter turtle window or a test recorder.
"""

import math
from dataclasses import dataclass, field
from typing import Callable, Iterable, Optional, Tuple

from fractal_config import FractalConfig
from fractal_errors import MalformedSequence


@dataclass(frozen=True)
class TurtleState:
    x: float
    y: float
    heading: float  # radians

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def forward(self, distance: float) -> "TurtleState":
        return TurtleState(
            self.x + distance * math.cos(self.heading),
            self.y + distance * math.sin(self.heading),
            self.heading,
        )

    def turn(self, delta: float) -> "TurtleState":
        return TurtleState(self.x, self.y, self.heading + delta)


@dataclass
class TurtleRun:
    state: TurtleState
    segments: int = 0
    depth: int = 0
    max_depth: int = 0
    cancelled: bool = False
    stack: list = field(default_factory=list, repr=False)


def step_length(config: FractalConfig, iterations: Optional[int] = None) -> float:
    """Segment length for a render, finer for deeper recursion.

    With zero iterations the raw axiom is drawn at the base length.
    """
    n = config.iterations if iterations is None else iterations
    return (config.length + 30) / max(n, 1)


def initial_state(config: FractalConfig) -> TurtleState:
    return TurtleState(0.0, 0.0, math.radians(config.heading))


def interpret(sequence: Iterable[str], config: FractalConfig, sink,
              start: Optional[TurtleState] = None, step: Optional[float] = None,
              cancel: Optional[Callable[[], bool]] = None) -> TurtleRun:
    state = start if start is not None else initial_state(config)
    if step is None:
        step = step_length(config)
    turn = math.radians(config.angle)
    draw_symbols = config.draw_symbols

    run = TurtleRun(state=state)
    stack = run.stack  # owned by this call only
    sink.move_to(state.x, state.y)

    for index, ch in enumerate(sequence):
        if ch in draw_symbols:
            state = state.forward(step)
            sink.line_to(state.x, state.y)
            sink.stroke()
            run.segments += 1
            if cancel is not None and cancel():
                run.cancelled = True
                break
        elif ch == '+':
            state = state.turn(-turn)
        elif ch == '-':
            state = state.turn(turn)
        elif ch == '[':
            stack.append(state)
            run.max_depth = max(run.max_depth, len(stack))
        elif ch == ']':
            if not stack:
                raise MalformedSequence(f"Unbalanced ']' at position {index}", index=index)
            state = stack.pop()
            sink.move_to(state.x, state.y)

    run.state = state
    run.depth = len(stack)
    return run


__all__ = ["TurtleState", "TurtleRun", "step_length", "initial_state", "interpret"]
