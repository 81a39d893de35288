"""Strategy condition overrides loaded from conditions.yaml.

Format::

    defaults:            # replaces built-in defaults per strategy kind
      scalping:
        rsi_max: 35
    symbols:             # per-symbol field overrides
      BTCUSDT:
        intraday:
          volume_multiplier: 1.5

Backward compatible: no YAML file = built-in defaults for every symbol.
"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ValidationError, model_validator

from tickwatch.models import StrategyConditionConfig, StrategyKind, default_conditions
from tickwatch.strategy import ConditionsStore

logger = logging.getLogger(__name__)


class ConditionsFile(BaseModel):
    """Top-level conditions.yaml configuration."""

    defaults: dict[StrategyKind, dict[str, Any]] = {}
    symbols: dict[str, dict[StrategyKind, dict[str, Any]]] = {}

    @model_validator(mode="after")
    def _validate(self):
        # Surface unknown fields and bad types at load time, not first tick
        for kind, fields in self.defaults.items():
            try:
                self._merge(kind, fields)
            except ValidationError as e:
                raise ValueError(f"Invalid {kind.value} default overrides: {e}")
        for symbol, kinds in self.symbols.items():
            for kind, fields in kinds.items():
                try:
                    self._merge(kind, {**self.defaults.get(kind, {}), **fields})
                except ValidationError as e:
                    raise ValueError(f"Invalid {kind.value} overrides for {symbol}: {e}")
        return self

    @staticmethod
    def _merge(kind: StrategyKind, fields: dict[str, Any]) -> StrategyConditionConfig:
        return StrategyConditionConfig.model_validate(
            {**default_conditions(kind).model_dump(), **fields}
        )

    def resolved_defaults(self) -> dict[StrategyKind, StrategyConditionConfig]:
        """Per-kind defaults with the YAML overrides merged in."""
        return {kind: self._merge(kind, fields) for kind, fields in self.defaults.items()}

    def build_store(self) -> ConditionsStore:
        return ConditionsStore(
            defaults=self.resolved_defaults(),
            symbol_overrides=self.symbols,
        )


def load_conditions_config(path: Path | str | None = None) -> ConditionsFile:
    """Load condition overrides from a YAML file.

    Falls back to built-in defaults if the file doesn't exist.

    Raises:
        ValueError: If the file is not valid YAML or fails validation.
    """
    config_path = Path(path or "conditions.yaml")

    if not config_path.exists():
        logger.info(
            "No conditions file found at %s, using built-in defaults",
            config_path,
        )
        return ConditionsFile()

    try:
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {config_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ValueError(f"{config_path} must contain a mapping at the top level")

    config = ConditionsFile(**raw)
    logger.info(
        "Loaded strategy conditions: %d default overrides, %d symbols",
        len(config.defaults),
        len(config.symbols),
    )
    return config
