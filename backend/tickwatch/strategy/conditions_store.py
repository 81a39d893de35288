"""Per-symbol, per-strategy condition configuration.

The store is the configuration provider the evaluator reads from.  A
symbol seen for the first time is initialized with the default config of
every strategy kind, so ``get_conditions`` never fails.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import TypeAdapter, ValidationError

from tickwatch.models import (
    DEFAULT_CONDITIONS,
    StrategyConditionConfig,
    StrategyKind,
)

logger = logging.getLogger(__name__)

SymbolConditions = dict[StrategyKind, StrategyConditionConfig]

_EXPORT_ADAPTER = TypeAdapter(dict[str, dict[StrategyKind, StrategyConditionConfig]])


class ConditionsStore:
    """Hold the StrategyConditionConfig for every (symbol, strategy) pair.

    Parameters
    ----------
    defaults : Mapping[StrategyKind, StrategyConditionConfig] | None
        Per-kind defaults replacing the built-in ones.
    symbol_overrides : Mapping[str, Mapping[StrategyKind, Mapping[str, Any]]] | None
        Field overrides applied on top of the defaults when a symbol is
        first initialized (or reset).
    """

    def __init__(
        self,
        defaults: Mapping[StrategyKind, StrategyConditionConfig] | None = None,
        symbol_overrides: Mapping[str, Mapping[StrategyKind, Mapping[str, Any]]] | None = None,
    ):
        self._defaults: SymbolConditions = dict(DEFAULT_CONDITIONS)
        if defaults:
            self._defaults.update(
                {StrategyKind(k): v for k, v in defaults.items()}
            )
        self._overrides = {
            symbol: {StrategyKind(k): dict(v) for k, v in kinds.items()}
            for symbol, kinds in (symbol_overrides or {}).items()
        }
        self._conditions: dict[str, SymbolConditions] = {}

    # ------------------------------------------------------------------
    # Defaults
    # ------------------------------------------------------------------

    def default_for(self, symbol: str, kind: StrategyKind | str) -> StrategyConditionConfig:
        """Build the initial config for a symbol, overrides merged in."""
        kind = StrategyKind(kind)
        base = self._defaults[kind]
        override = self._overrides.get(symbol, {}).get(kind)
        if not override:
            return base.model_copy(deep=True)
        return StrategyConditionConfig.model_validate(
            {**base.model_dump(), **override}
        )

    def _initialize_symbol(self, symbol: str) -> SymbolConditions:
        conditions = {kind: self.default_for(symbol, kind) for kind in StrategyKind}
        self._conditions[symbol] = conditions
        logger.debug("Initialized strategy conditions for %s", symbol)
        return conditions

    def _symbol(self, symbol: str) -> SymbolConditions:
        return self._conditions.get(symbol) or self._initialize_symbol(symbol)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def get_conditions(
        self, symbol: str, kind: StrategyKind | str
    ) -> StrategyConditionConfig:
        """Get the config for a pair, initializing the symbol on first access."""
        return self._symbol(symbol)[StrategyKind(kind)]

    def update_conditions(
        self, symbol: str, kind: StrategyKind | str, **changes: Any
    ) -> StrategyConditionConfig:
        """Merge field changes into a pair's config.

        Raises:
            pydantic.ValidationError: If a field is unknown or has the wrong type.
        """
        kind = StrategyKind(kind)
        conditions = self._symbol(symbol)
        updated = StrategyConditionConfig.model_validate(
            {**conditions[kind].model_dump(), **changes}
        )
        conditions[kind] = updated
        logger.info("Updated %s conditions for %s: %s", kind.value, symbol, changes)
        return updated

    def reset_conditions(
        self, symbol: str, kind: StrategyKind | str
    ) -> StrategyConditionConfig:
        """Restore a pair's config to its defaults."""
        kind = StrategyKind(kind)
        conditions = self._symbol(symbol)
        conditions[kind] = self.default_for(symbol, kind)
        logger.info("Reset %s conditions for %s to defaults", kind.value, symbol)
        return conditions[kind]

    def get_all_for_symbol(self, symbol: str) -> SymbolConditions:
        return dict(self._symbol(symbol))

    def symbols(self) -> list[str]:
        """Symbols that have been initialized."""
        return sorted(self._conditions)

    def export_json(self) -> str:
        """Serialize every initialized config to JSON."""
        return _EXPORT_ADAPTER.dump_json(self._conditions, indent=2).decode()

    def import_json(self, data: str) -> bool:
        """Replace all configs with the JSON produced by ``export_json``.

        Strategy kinds missing for a symbol get their defaults.  On
        malformed input the current configs are left untouched.

        Returns:
            True if the import succeeded.
        """
        try:
            imported = _EXPORT_ADAPTER.validate_json(data)
        except ValidationError as e:
            logger.error("Failed to import strategy conditions: %s", e)
            return False

        conditions: dict[str, SymbolConditions] = {}
        for symbol, kinds in imported.items():
            conditions[symbol] = {
                kind: kinds.get(kind) or self.default_for(symbol, kind)
                for kind in StrategyKind
            }
        self._conditions = conditions
        logger.info("Imported strategy conditions for %d symbols", len(conditions))
        return True
