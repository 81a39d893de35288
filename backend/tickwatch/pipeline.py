"""Per-symbol tick processing pipeline.

For every tick:

1. append it to the symbol's bounded tick buffer
2. extend the symbol's CVD series by one point
3. recompute the indicator snapshot from the buffer
4. record the snapshot in the indicator history (if configured)
5. evaluate every enabled strategy with its (symbol, strategy) config
6. run the edge detector and emit a Signal on each rising edge

Ticks for one symbol are processed strictly in order under that symbol's
lock.  Symbols share no lock and may be processed concurrently.

This module is pure business logic with no I/O dependencies.  Signal
delivery is injected via callbacks.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable

from tickwatch.cvd import CvdSeries, CvdStore, DEFAULT_MAX_LENGTH
from tickwatch.history import IndicatorHistory
from tickwatch.indicators import IndicatorCalculator
from tickwatch.models import (
    IndicatorSnapshot,
    Signal,
    StrategyKind,
    Tick,
    TickBuffer,
)
from tickwatch.strategy import (
    ConditionsStore,
    ConditionStrategy,
    EdgeDetector,
    EvaluationResult,
    SignalCallback,
    create_strategy,
)

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_SIZE = 200


@dataclass
class SymbolState:
    """Mutable state owned by one symbol's pipeline."""

    buffer: TickBuffer
    cvd: CvdSeries
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    ticks_processed: int = 0


@dataclass
class TickResult:
    """Result of processing one tick.

    Attributes:
        snapshot: Indicator values after the tick.
        evaluations: Strategy kind -> evaluation result.
        signals: Signals triggered by this tick (rising edges only).
    """

    snapshot: IndicatorSnapshot
    evaluations: dict[str, EvaluationResult] = field(default_factory=dict)
    signals: list[Signal] = field(default_factory=list)


class TickPipeline:
    """Turn ticks into indicator snapshots, condition vectors and signals.

    All collaborators are injected and held by reference:
    - conditions: configuration provider read on every evaluation
    - history: optional snapshot history for trend queries
    - calculator: indicator calculator (default periods if omitted)
    """

    def __init__(
        self,
        conditions: ConditionsStore | None = None,
        strategies: Iterable[StrategyKind | str] = tuple(StrategyKind),
        history_size: int = DEFAULT_HISTORY_SIZE,
        cvd_max_length: int = DEFAULT_MAX_LENGTH,
        history: IndicatorHistory | None = None,
        calculator: IndicatorCalculator | None = None,
    ):
        self.conditions = conditions or ConditionsStore()
        self.history = history
        self.calculator = calculator or IndicatorCalculator()
        self.history_size = history_size
        self.cvd_store = CvdStore(max_length=cvd_max_length)
        self.edge_detector = EdgeDetector()

        self._strategies: dict[str, ConditionStrategy] = {}
        for kind in strategies:
            strategy = create_strategy(kind)
            self._strategies[strategy.name] = strategy

        self._states: dict[str, SymbolState] = {}
        self._callbacks: list[SignalCallback] = []

    @property
    def strategies(self) -> list[str]:
        return list(self._strategies)

    def on_signal(self, callback: SignalCallback) -> None:
        """Register callback for new signals.

        Note: Duplicate callbacks are ignored.
        """
        if callback not in self._callbacks:
            self._callbacks.append(callback)

    def off_signal(self, callback: SignalCallback) -> None:
        """Unregister callback for new signals."""
        if callback in self._callbacks:
            self._callbacks.remove(callback)

    # ------------------------------------------------------------------
    # Per-symbol state
    # ------------------------------------------------------------------

    def _state(self, symbol: str) -> SymbolState:
        state = self._states.get(symbol)
        if state is None:
            state = SymbolState(
                buffer=TickBuffer(symbol=symbol, max_size=self.history_size),
                cvd=self.cvd_store.get(symbol),
            )
            self._states[symbol] = state
            logger.info("Tracking new symbol %s", symbol)
        return state

    def symbols(self) -> list[str]:
        return sorted(self._states)

    def get_state(self, symbol: str) -> SymbolState | None:
        return self._states.get(symbol)

    def reset(self, symbol: str) -> None:
        """Forget everything about a symbol; the next tick starts fresh."""
        self._states.pop(symbol, None)
        self.cvd_store.reset(symbol)
        self.edge_detector.reset(symbol)

    # ------------------------------------------------------------------
    # Core logic
    # ------------------------------------------------------------------

    def _evaluate(self, state: SymbolState, tick: Tick) -> TickResult:
        state.buffer.add(tick)
        state.ticks_processed += 1

        prices = state.buffer.prices()
        volumes = state.buffer.volumes()

        cvd_value = state.cvd.update(prices, volumes)
        snapshot = self.calculator.calculate(
            tick.symbol,
            prices,
            volumes,
            tick.price,
            cvd=cvd_value,
            cvd_trend=state.cvd.trend(),
            cvd_slope=state.cvd.slope(),
        )

        if self.history is not None:
            self.history.add_snapshot(tick.symbol, snapshot)

        result = TickResult(snapshot=snapshot)
        for kind, strategy in self._strategies.items():
            config = self.conditions.get_conditions(tick.symbol, kind)
            evaluation = strategy.evaluate(
                snapshot,
                tick.price,
                config,
                cvd_slope=state.cvd.slope(config.cvd_lookback_candles),
            )
            result.evaluations[kind] = evaluation

            # Build the signal before committing the edge so a failure
            # leaves the pair armed
            signal = None
            if evaluation.all_met and not self.edge_detector.is_triggered(
                tick.symbol, kind
            ):
                signal = Signal(
                    symbol=tick.symbol,
                    strategy=kind,
                    timestamp=tick.timestamp,
                    entry_price=evaluation.entry_price,
                    take_profit=evaluation.take_profit,
                    stop_loss=evaluation.stop_loss,
                    snapshot=snapshot,
                    conditions=evaluation.conditions,
                )

            fired = self.edge_detector.update(
                tick.symbol, kind, evaluation.all_met, evaluation.conditions
            )
            if fired:
                result.signals.append(signal)
                logger.info(
                    "%s LONG signal: %s @ %s TP=%.6f SL=%.6f",
                    kind.upper(),
                    tick.symbol,
                    tick.price,
                    signal.take_profit,
                    signal.stop_loss,
                )

        return result

    async def _emit(self, signal: Signal) -> None:
        for callback in self._callbacks:
            try:
                await callback(signal)
            except Exception as e:
                logger.error("Signal callback error for %s: %s", signal.id, e)

    async def process_tick(self, tick: Tick) -> TickResult:
        """Process one tick for its symbol.

        Ticks of the same symbol are serialized; each is fully processed
        (including signal hand-off) before the next one starts.

        Args:
            tick: The incoming tick

        Returns:
            TickResult with the snapshot, evaluations and triggered signals
        """
        state = self._state(tick.symbol)
        async with state.lock:
            result = self._evaluate(state, tick)
            for signal in result.signals:
                await self._emit(signal)
        return result
