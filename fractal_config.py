"""
Fractal configuration records.

A fractal is described by an L-system (variables, constants, axiom and
production rules) plus the few numbers the turtle needs to draw it:

- angle     : turn increment in degrees for '+' and '-'
- length    : segment length basis, see turtle_interpreter.step_length
- heading   : starting heading in degrees (-90 points up on a y-down canvas)
- canvas_offset / canvas_anchor_x : where the origin sits on the canvas,
  as fractions of the canvas height (raised from the bottom) and width

Rules are written the way the browser presets wrote them, "X=F+[[X]-X]-F".
"""

import json
import math
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from fractal_errors import InvalidConfig

CONTROL_SYMBOLS = "+-[]"


def parse_rule(text: str) -> Optional[Tuple[str, str]]:
    """Split "X=XY" into ("X", "XY"). An empty string means no rule."""
    if text is None or not text.strip():
        return None
    if "=" not in text:
        raise InvalidConfig(f"Rule {text!r} should be of the form X=XY")
    lhs, rhs = text.split("=", 1)
    lhs = lhs.strip()
    rhs = rhs.strip()
    if len(lhs) != 1:
        raise InvalidConfig(f"Rule {text!r} must rewrite exactly one symbol, got {lhs!r}")
    return lhs, rhs


def parse_rules(rules: Iterable[str]) -> Dict[str, str]:
    parsed = {}
    for text in rules:
        rule = parse_rule(text)
        if rule is None:
            continue
        lhs, rhs = rule
        parsed[lhs] = rhs  # last one wins
    return parsed


@dataclass(frozen=True)
class FractalConfig:
    variables: str
    constants: str
    angle: float
    iterations: int
    axiom: str
    rules: Mapping[str, str] = field(default_factory=dict, hash=False)
    length: float = 0.0
    canvas_offset: float = 0.0
    name: str = "Custom"
    heading: float = -90.0
    canvas_anchor_x: float = 0.5
    draw_symbols: str = "F"
    max_iterations: Optional[int] = None

    def __post_init__(self):
        if not self.axiom:
            raise InvalidConfig(f"{self.name}: axiom must not be empty")
        for label, value in (("angle", self.angle), ("length", self.length), ("heading", self.heading)):
            if not math.isfinite(value):
                raise InvalidConfig(f"{self.name}: {label} must be a finite number, got {value}")
        if not self.angle > 0:
            raise InvalidConfig(f"{self.name}: angle must be > 0, got {self.angle}")
        if self.iterations < 0:
            raise InvalidConfig(f"{self.name}: iterations must be >= 0, got {self.iterations}")
        if self.max_iterations is not None and self.max_iterations < 0:
            raise InvalidConfig(f"{self.name}: max_iterations must be >= 0")
        for label, value in (("canvas_offset", self.canvas_offset), ("canvas_anchor_x", self.canvas_anchor_x)):
            if not 0.0 <= value <= 1.0:
                raise InvalidConfig(f"{self.name}: {label} must be within [0, 1], got {value}")

        shared = set(self.variables) & set(self.constants)
        if shared:
            raise InvalidConfig(
                f"{self.name}: symbols {''.join(sorted(shared))!r} are both variables and constants"
            )
        for lhs in self.rules:
            if len(lhs) != 1:
                raise InvalidConfig(f"{self.name}: rule left side {lhs!r} must be a single symbol")
            if lhs not in self.variables:
                raise InvalidConfig(f"{self.name}: rule for {lhs!r} but {lhs!r} is not a variable")

        # Read-only copy so shared presets cannot be rewritten in place
        object.__setattr__(self, "rules", MappingProxyType(dict(self.rules)))

    @property
    def alphabet(self) -> str:
        return self.variables + self.constants

    def with_iterations(self, iterations: int) -> "FractalConfig":
        return FractalConfig(**{**self.to_dict(), "iterations": iterations})

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "variables": self.variables,
            "constants": self.constants,
            "angle": self.angle,
            "iterations": self.iterations,
            "axiom": self.axiom,
            "rules": dict(self.rules),
            "length": self.length,
            "canvas_offset": self.canvas_offset,
            "heading": self.heading,
            "canvas_anchor_x": self.canvas_anchor_x,
            "draw_symbols": self.draw_symbols,
            "max_iterations": self.max_iterations,
        }


def undefined_symbols(config: FractalConfig) -> List[str]:
    """Symbols used by the axiom or a rule that are neither variables nor constants."""
    known = set(config.alphabet)
    used = set(config.axiom)
    for rhs in config.rules.values():
        used.update(rhs)
    return sorted(used - known)


# ---------------------- dict / JSON loading ----------------------

def _number(data, key, default=None):
    value = data.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidConfig(f"{key} must be a number")
    if not math.isfinite(value):
        raise InvalidConfig(f"{key} must be a finite number")
    return float(value)


def _integer(data, key, default=None):
    value = data.get(key)
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidConfig(f"{key} must be an integer")
    return value


def _string(data, key, default=None):
    value = data.get(key, default)
    if not isinstance(value, str):
        raise InvalidConfig(f"{key} must be a string")
    return value


def config_from_dict(data: Dict[str, Any]) -> FractalConfig:
    if not isinstance(data, dict):
        raise InvalidConfig("config must be an object")
    for key in ("axiom", "variables", "angle"):
        if key not in data:
            raise InvalidConfig(f"config is missing {key!r}")

    raw_rules = data.get("rules", {})
    if isinstance(raw_rules, dict):
        rules = {}
        for lhs, rhs in raw_rules.items():
            if not isinstance(rhs, str):
                raise InvalidConfig(f"rule for {lhs!r} must be a string")
            rules[lhs] = rhs
    elif isinstance(raw_rules, list):
        if not all(isinstance(r, str) for r in raw_rules):
            raise InvalidConfig("rules must be strings of the form X=XY")
        rules = parse_rules(raw_rules)
    else:
        raise InvalidConfig("rules must be an object or a list of X=XY strings")

    return FractalConfig(
        name=_string(data, "name", "Custom"),
        variables=_string(data, "variables"),
        constants=_string(data, "constants", CONTROL_SYMBOLS),
        angle=_number(data, "angle"),
        iterations=_integer(data, "iterations", 1),
        axiom=_string(data, "axiom"),
        rules=rules,
        length=_number(data, "length", 0),
        canvas_offset=_number(data, "canvas_offset", 0),
        heading=_number(data, "heading", -90),
        canvas_anchor_x=_number(data, "canvas_anchor_x", 0.5),
        draw_symbols=_string(data, "draw_symbols", "F"),
        max_iterations=_integer(data, "max_iterations", None),
    )


def load_config(path: str) -> FractalConfig:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidConfig(f"{path}: invalid JSON ({e})") from e
    return config_from_dict(data)


__all__ = [
    "CONTROL_SYMBOLS",
    "FractalConfig",
    "parse_rule",
    "parse_rules",
    "undefined_symbols",
    "config_from_dict",
    "load_config",
]
