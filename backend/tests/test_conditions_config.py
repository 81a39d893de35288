"""Tests for conditions.yaml loading."""

import pytest
import yaml

from tickwatch.models import StrategyKind, default_conditions
from tickwatch_app.conditions_config import ConditionsFile, load_conditions_config


def write_yaml(path, data) -> str:
    path.write_text(yaml.safe_dump(data))
    return str(path)


class TestLoadConditionsConfig:
    def test_missing_file_uses_builtin_defaults(self, tmp_path):
        config = load_conditions_config(tmp_path / "absent.yaml")

        assert config.defaults == {}
        assert config.symbols == {}
        store = config.build_store()
        for kind in StrategyKind:
            assert store.get_conditions("BTCUSDT", kind) == default_conditions(kind)

    def test_empty_file(self, tmp_path):
        path = tmp_path / "conditions.yaml"
        path.write_text("")

        assert load_conditions_config(path).symbols == {}

    def test_defaults_and_symbol_overrides(self, tmp_path):
        path = write_yaml(
            tmp_path / "conditions.yaml",
            {
                "defaults": {"scalping": {"rsi_max": 35}},
                "symbols": {
                    "BTCUSDT": {"scalping": {"volume_multiplier": 2.5}},
                    "ETHUSDT": {"pump": {"use_ma5": False}},
                },
            },
        )

        store = load_conditions_config(path).build_store()

        btc = store.get_conditions("BTCUSDT", "scalping")
        assert btc.rsi_max == 35
        assert btc.volume_multiplier == 2.5
        # Fields not overridden keep the built-in scalping defaults
        assert btc.take_profit_percent == 0.5

        assert store.get_conditions("SOLUSDT", "scalping").rsi_max == 35
        assert store.get_conditions("ETHUSDT", "pump").use_ma5 is False
        assert store.get_conditions("ETHUSDT", "intraday") == default_conditions("intraday")

    def test_resolved_defaults(self):
        config = ConditionsFile(defaults={"intraday": {"rsi_min": 40}})
        resolved = config.resolved_defaults()

        assert set(resolved) == {StrategyKind.INTRADAY}
        assert resolved[StrategyKind.INTRADAY].rsi_min == 40
        assert resolved[StrategyKind.INTRADAY].rsi_max == 65

    def test_unknown_field_rejected(self, tmp_path):
        path = write_yaml(
            tmp_path / "conditions.yaml",
            {"symbols": {"BTCUSDT": {"scalping": {"rsi_maximum": 35}}}},
        )
        with pytest.raises(ValueError, match="BTCUSDT"):
            load_conditions_config(path)

    def test_bad_default_type_rejected(self, tmp_path):
        path = write_yaml(
            tmp_path / "conditions.yaml",
            {"defaults": {"pump": {"rsi_min": "low"}}},
        )
        with pytest.raises(ValueError, match="pump"):
            load_conditions_config(path)

    def test_unknown_strategy_rejected(self, tmp_path):
        path = write_yaml(tmp_path / "conditions.yaml", {"defaults": {"swing": {}}})
        with pytest.raises(ValueError):
            load_conditions_config(path)

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "conditions.yaml"
        path.write_text("defaults: [unclosed\n")
        with pytest.raises(ValueError, match="Invalid YAML"):
            load_conditions_config(path)

    def test_top_level_must_be_mapping(self, tmp_path):
        path = tmp_path / "conditions.yaml"
        path.write_text("- scalping\n- pump\n")
        with pytest.raises(ValueError, match="mapping"):
            load_conditions_config(path)
