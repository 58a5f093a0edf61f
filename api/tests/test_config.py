import json

import pytest

from phishshield.config import (
    DEFAULT_CONFIG,
    RULE_WEIGHTS,
    URGENCY,
    HeuristicsConfig,
    Settings,
    SignalWeight,
    load_heuristics_config,
    load_weights_file,
)


def test_tables_are_read_only():
    with pytest.raises(TypeError):
        RULE_WEIGHTS[URGENCY] = SignalWeight(1, 1)
    with pytest.raises(TypeError):
        DEFAULT_CONFIG.weights[URGENCY] = SignalWeight(1, 1)


def test_signal_weight_caps():
    w = SignalWeight(per_hit=20, cap=50)
    assert w.apply(0) == 0
    assert w.apply(2) == 40
    assert w.apply(3) == 50


def test_with_weights_returns_new_config():
    tuned = DEFAULT_CONFIG.with_weights({URGENCY: SignalWeight(per_hit=10, cap=10)})
    assert tuned.weight(URGENCY).cap == 10
    assert DEFAULT_CONFIG.weight(URGENCY) == RULE_WEIGHTS[URGENCY]


def test_unknown_and_missing_weights_rejected():
    with pytest.raises(KeyError):
        DEFAULT_CONFIG.with_weights({"sparkle": SignalWeight(1, 1)})
    with pytest.raises(KeyError):
        HeuristicsConfig(weights={URGENCY: SignalWeight(1, 1)})


def test_load_weights_file(tmp_path):
    path = tmp_path / "weights.json"
    path.write_text(json.dumps({"urgency": {"per_hit": 7, "cap": 21}}))
    config = load_weights_file(path)
    assert config.weight(URGENCY) == SignalWeight(per_hit=7.0, cap=21.0)

    settings = Settings(weights_file=str(path))
    assert load_heuristics_config(settings).weight(URGENCY).per_hit == 7.0
    assert load_heuristics_config(Settings()) is DEFAULT_CONFIG


@pytest.mark.parametrize(
    "content",
    ["{not json", "[1, 2]", '{"urgency": {"per_hit": -1, "cap": 5}}', '{"urgency": {"cap": 5}}'],
)
def test_bad_weights_file(tmp_path, content):
    path = tmp_path / "weights.json"
    path.write_text(content)
    with pytest.raises(ValueError):
        load_weights_file(path)
