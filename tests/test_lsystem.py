import pytest

from fractal_config import FractalConfig
from fractal_errors import ResourceLimitExceeded
from fractal_presets import PRESETS, select_preset
from lsystem import expand, generate_lsystem_state, rewrite, stream_expand


def tree_config(iterations=1):
    return FractalConfig(
        variables="X",
        constants="F+-[]",
        angle=25,
        iterations=iterations,
        axiom="X",
        rules={"X": "F+[[X]-X]-F[-FX]+X"},
    )


def test_zero_iterations_returns_axiom():
    for config in PRESETS.values():
        assert expand(config.with_iterations(0)) == config.axiom


def test_single_generation_tree():
    assert expand(tree_config(1)) == "F+[[X]-X]-F[-FX]+X"


def test_dragon_curve_golden_output():
    sequence = expand(select_preset(2, 2))
    assert sequence == "FX+YF++-FX-YF+"
    assert len(sequence) == 14


def test_generations_compose():
    for config in PRESETS.values():
        for k in range(3):
            assert expand(config, iterations=k + 1) == rewrite(expand(config, iterations=k), config)


def test_rules_do_not_see_their_own_output():
    config = FractalConfig(variables="AB", constants="", angle=90, iterations=1, axiom="A",
                           rules={"A": "AB", "B": "A"})
    assert expand(config) == "AB"
    assert expand(config, iterations=2) == "ABA"
    assert expand(config, iterations=3) == "ABAAB"


def test_seed_symbol_vanishes_after_one_generation():
    config = FractalConfig(variables="SX", constants="F", angle=90, iterations=1, axiom="SX",
                           rules={"S": "", "X": "XF"})
    assert expand(config, iterations=1) == "XF"
    for n in range(1, 5):
        assert "S" not in expand(config, iterations=n)


def test_symbols_without_rules_pass_through():
    config = FractalConfig(variables="XY", constants="+", angle=90, iterations=2, axiom="XY+Q",
                           rules={"X": "XX"})
    assert expand(config) == "XXXXY+Q"


def test_generate_lsystem_state_only_rewrites_variables():
    # Q has a rule but is not a variable
    assert generate_lsystem_state("QX", 1, {"Q": "QQ", "X": "Q"}, "X") == "QQ"


def test_expand_respects_max_length():
    config = select_preset(2)
    with pytest.raises(ResourceLimitExceeded) as info:
        expand(config, max_length=1000)
    assert info.value.limit == 1000


def test_axiom_longer_than_limit_is_rejected():
    config = FractalConfig(variables="X", constants="F", angle=90, iterations=0, axiom="F" * 20)
    with pytest.raises(ResourceLimitExceeded):
        expand(config, max_length=10)


def test_environment_limit_applies(monkeypatch):
    monkeypatch.setenv("MAX_SEQUENCE_LENGTH", "50")
    with pytest.raises(ResourceLimitExceeded):
        expand(select_preset(1, 3))


def test_bad_environment_limit_falls_back(monkeypatch):
    monkeypatch.setenv("MAX_SEQUENCE_LENGTH", "lots")
    assert expand(select_preset(2, 2)) == "FX+YF++-FX-YF+"


def test_stream_expand_matches_expand():
    for config in PRESETS.values():
        n = min(config.iterations, 3)
        assert "".join(stream_expand(config, iterations=n)) == expand(config, iterations=n)


def test_stream_expand_limit():
    with pytest.raises(ResourceLimitExceeded):
        list(stream_expand(select_preset(2), max_length=100))


def test_stream_expand_is_lazy():
    stream = stream_expand(select_preset(2), max_length=0)
    assert [next(stream) for _ in range(3)] == ["F", "X", "+"]
