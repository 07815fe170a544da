"""
Lindenmayer system is a parallel rewriting system and a type of formal grammar.
It consists of an alphabet of symbols that can be used to make strings, a collection of production rules that expand
each symbol into some larger string of symbols.

Rewriting is parallel: every generation reads the previous string and writes a
fresh one, so a rule never sees its own output within the same generation.

Example (Dragon Curve, X -> X+YF+, Y -> -FX-Y):
- "FX"              (axiom)
- "FX+YF+"          (1 generation)
- "FX+YF++-FX-YF+"  (2 generations)

Symbols without a rule (constants, or variables with no production) are copied
unchanged. A rule with an empty right side deletes its symbol ("F=" seeds).

Growth is exponential in the number of generations, so every expansion is
capped at a maximum length (MAX_SEQUENCE_LENGTH, see app_config).
"""

from typing import Dict, Iterator, Optional

from app_config import get_max_sequence_length
from fractal_config import FractalConfig
from fractal_errors import ResourceLimitExceeded


def _too_long(limit):
    return ResourceLimitExceeded(
        f"Expanded sequence would exceed {limit} symbols; lower the iteration count",
        limit=limit,
    )


def generate_lsystem_state(state: str, n: int, rules: Dict[str, str], variables: str,
                           max_length: Optional[int] = None) -> str:
    for _ in range(n):
        final_state = []
        size = 0
        for ch in state:
            if ch in variables and ch in rules:
                piece = rules[ch]
            else:
                piece = ch  # constants and rule-less variables pass through
            size += len(piece)
            if max_length and size > max_length:
                raise _too_long(max_length)
            final_state.append(piece)
        state = "".join(final_state)
    return state


def rewrite(sequence: str, config: FractalConfig, max_length: Optional[int] = None) -> str:
    """Apply exactly one generation of the config's rules to sequence."""
    return generate_lsystem_state(sequence, 1, config.rules, config.variables, max_length)


def expand(config: FractalConfig, iterations: Optional[int] = None,
           max_length: Optional[int] = None) -> str:
    n = config.iterations if iterations is None else iterations
    if max_length is None:
        max_length = get_max_sequence_length()
    if max_length and len(config.axiom) > max_length:
        raise _too_long(max_length)
    state = config.axiom
    for _ in range(n):
        state = rewrite(state, config, max_length)
    return state


def stream_expand(config: FractalConfig, iterations: Optional[int] = None,
                  max_length: Optional[int] = None) -> Iterator[str]:
    """Yield the symbols of expand(config) one at a time, depth first.

    No generation is ever materialized; memory use is bounded by the number
    of generations. max_length=0 disables the cap.
    """
    n = config.iterations if iterations is None else iterations
    if max_length is None:
        max_length = get_max_sequence_length()
    rules = {lhs: rhs for lhs, rhs in config.rules.items() if lhs in config.variables}

    # Explicit stack of (string, position, remaining generations)
    stack = [(config.axiom, 0, n)]
    produced = 0
    while stack:
        text, pos, depth = stack.pop()
        if pos >= len(text):
            continue
        stack.append((text, pos + 1, depth))
        ch = text[pos]
        if depth > 0 and ch in rules:
            stack.append((rules[ch], 0, depth - 1))
            continue
        produced += 1
        if max_length and produced > max_length:
            raise _too_long(max_length)
        yield ch


__all__ = ["generate_lsystem_state", "rewrite", "expand", "stream_expand"]
