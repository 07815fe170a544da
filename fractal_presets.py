"""
Catalog of bundled fractals, selectable by integer id.

Ids 1-4 are the original browser presets (Fractal Tree, Dragon Curve,
Frec Fractal, Bend Tree). The rest are the classic systems that shipped
with the canvas renderer.

Turn convention for every preset: '+' subtracts the angle from the
heading, '-' adds it. Headings are in degrees on a y-down canvas, so -90
points up and 0 points right.
"""

from typing import Dict, List, Optional

from fractal_config import FractalConfig, parse_rules
from fractal_errors import InvalidConfig, ResourceLimitExceeded


def _preset(name, variables, axiom, rules, angle, iterations, max_iterations, **kwargs):
    kwargs.setdefault("constants", "+-[]")
    return FractalConfig(
        name=name,
        variables=variables,
        axiom=axiom,
        rules=parse_rules(rules),
        angle=angle,
        iterations=iterations,
        max_iterations=max_iterations,
        **kwargs,
    )


PRESETS: Dict[int, FractalConfig] = {
    1: _preset(
        "Fractal Tree", "XF", "X",
        ["X=F+[[X]-X]-F[-FX]+X", "F=FF", ""],
        angle=30, iterations=7, max_iterations=7,
        length=0, canvas_offset=0.0,
    ),
    2: _preset(
        "Dragon Curve", "XY", "FX",
        ["X=X+YF+", "Y=-FX-Y", ""],
        angle=90, iterations=12, max_iterations=12,
        constants="F+-[]", length=20, canvas_offset=0.35, heading=0,
    ),
    # F is a seed symbol here: each generation drops the previous F's
    3: _preset(
        "Frec Fractal", "FXY", "XYXYXYX+XYXYXYX+XYXYXYX+XYXYXYX",
        ["F=", "X=FX+FX+FXFY-FY-", "Y=+FX+FXFY-FY-FY"],
        angle=90, iterations=4, max_iterations=4,
        length=-10, canvas_offset=0.8, heading=0,
    ),
    4: _preset(
        "Bend Tree", "F", "F",
        ["F=FF-[-F+F+F]+[+F-F-F]", "", ""],
        angle=22.5, iterations=4, max_iterations=5,
        length=0, canvas_offset=0.0,
    ),
    5: _preset(
        "Barnsley Fern", "XF", "X",
        ["X=F-[[X]+X]+F[+FX]-X", "F=FF"],
        angle=22.5, iterations=6, max_iterations=7,
        canvas_offset=0.0, heading=-60,
    ),
    6: _preset(
        "32 Segment Curve", "F", "F+F+F+F",
        ["F=-F+F-F-F+F+FF-F+F+FF+F-F-FF+FF-FF+F+F-FF-F-F+FF-F-F+F+F-F+"],
        angle=90, iterations=2, max_iterations=3,
        canvas_offset=0.5, heading=0,
    ),
    7: _preset(
        "Koch Island", "F", "F+F+F+F",
        ["F=F+F-F-FF+F+F-F"],
        angle=90, iterations=3, max_iterations=4,
        canvas_offset=0.5, heading=0,
    ),
    # A and B both mean "move forward"
    8: _preset(
        "Peano-Gosper Curve", "AB", "A",
        ["A=A-B--B+A++AA+B-", "B=+A-BB--B-A++A+B"],
        angle=60, iterations=4, max_iterations=5,
        canvas_offset=0.7, heading=0, draw_symbols="AB",
    ),
    9: _preset(
        "Hilbert Curve", "XY", "X",
        ["X=+YF-XFX-FY+", "Y=-XF+YFY+FX-"],
        angle=90, iterations=6, max_iterations=7,
        constants="F+-[]", canvas_offset=0.3, canvas_anchor_x=0.3, heading=0,
    ),
    10: _preset(
        "Sierpinski Triangle", "XF", "FXF--FF--FF",
        ["X=--FXF++FXF++FXF--", "F=FF"],
        angle=60, iterations=5, max_iterations=7,
        canvas_offset=0.2, canvas_anchor_x=0.2, heading=0,
    ),
    11: _preset(
        "Sierpinski Square", "F", "F+F+F+F",
        ["F=FF+F+F+F+FF"],
        angle=90, iterations=4, max_iterations=5,
        canvas_offset=0.2, canvas_anchor_x=0.2, heading=0,
    ),
    12: _preset(
        "Fractal Plant", "FVWXYZ", "VZFFF",
        ["F=F", "V=[+++W][---W]YV", "W=+X[-W]Z", "X=-W[+X]Z", "Y=YZ", "Z=[-FFF][+FFF]F"],
        angle=18, iterations=9, max_iterations=11,
        canvas_offset=0.2,
    ),
}


def list_presets() -> List[dict]:
    return [
        {
            "id": fractal_id,
            "name": config.name,
            "iterations": config.iterations,
            "max_iterations": config.max_iterations,
            "angle": config.angle,
        }
        for fractal_id, config in sorted(PRESETS.items())
    ]


def get_preset(fractal_id: int) -> FractalConfig:
    if fractal_id not in PRESETS:
        raise KeyError(f"Unknown fractal type {fractal_id}")
    return PRESETS[fractal_id]


def apply_iterations(config: FractalConfig, iterations: Optional[int] = None) -> FractalConfig:
    """Substitute a user supplied iteration count, checking it against the config's bound."""
    if iterations is None:
        return config
    if iterations < 0:
        raise InvalidConfig(f"iterations must be >= 0, got {iterations}")
    if config.max_iterations is not None and iterations > config.max_iterations:
        raise ResourceLimitExceeded(
            f"{config.name} supports at most {config.max_iterations} iterations, got {iterations}",
            limit=config.max_iterations,
        )
    return config.with_iterations(iterations)


def select_preset(fractal_id: int, iterations: Optional[int] = None) -> FractalConfig:
    return apply_iterations(get_preset(fractal_id), iterations)


__all__ = ["PRESETS", "list_presets", "get_preset", "apply_iterations", "select_preset"]
