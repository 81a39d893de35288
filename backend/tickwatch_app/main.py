"""Application wiring and CLI entry point.

Builds the tick pipeline from settings and conditions.yaml, attaches the
signal log, and keeps the indicator history purged on a fixed cadence.
Ticks come from an external transport; for offline use the ``replay``
command feeds them from a CSV file with columns
``symbol,timestamp,price,volume``.

Usage:
    python -m tickwatch_app replay ticks.csv
    python -m tickwatch_app replay ticks.csv --symbols BTCUSDT --strategies scalping
    python -m tickwatch_app show-conditions BTCUSDT
"""

import argparse
import asyncio
import csv
import logging
from pathlib import Path
from typing import AsyncIterator, Iterator

from pydantic import ValidationError

from tickwatch.history import IndicatorHistory
from tickwatch.indicators import IndicatorCalculator
from tickwatch.models import Tick
from tickwatch.pipeline import TickPipeline, TickResult
from tickwatch_app.conditions_config import load_conditions_config
from tickwatch_app.config import Settings, get_settings
from tickwatch_app.sinks import SignalLog

logger = logging.getLogger(__name__)


class TickwatchService:
    """Pipeline plus its background housekeeping."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.history = IndicatorHistory(
            max_age_seconds=settings.snapshot_max_age_seconds
        )
        self.signal_log = SignalLog(
            max_signals=settings.signal_log_size,
            path=settings.signal_log_file or None,
        )

        conditions = load_conditions_config(settings.conditions_file).build_store()
        self.pipeline = TickPipeline(
            conditions=conditions,
            strategies=settings.strategies,
            history_size=settings.history_size,
            cvd_max_length=settings.cvd_max_length,
            history=self.history,
            calculator=IndicatorCalculator(
                rsi_period=settings.rsi_period,
                bollinger_period=settings.bollinger_period,
                bollinger_std=settings.bollinger_std,
                volume_period=settings.volume_period,
                volume_spike_threshold=settings.volume_spike_threshold,
            ),
        )
        self.pipeline.on_signal(self.signal_log)
        self._purge_task: asyncio.Task | None = None

    async def _purge_loop(self) -> None:
        interval = self.settings.snapshot_purge_interval_seconds
        while True:
            await asyncio.sleep(interval)
            self.history.purge()

    async def start(self) -> None:
        if self._purge_task is None:
            self._purge_task = asyncio.create_task(self._purge_loop())
            logger.info(
                "Tickwatch started: strategies=%s, history=%d ticks, cvd=%d points",
                ",".join(self.pipeline.strategies),
                self.settings.history_size,
                self.settings.cvd_max_length,
            )

    async def stop(self) -> None:
        if self._purge_task is not None:
            self._purge_task.cancel()
            try:
                await self._purge_task
            except asyncio.CancelledError:
                pass
            self._purge_task = None
            logger.info("Tickwatch stopped")

    async def ingest(
        self, symbol: str, timestamp: float, price: float, volume: float
    ) -> TickResult:
        """Entry point for tick transports."""
        tick = Tick(symbol=symbol, timestamp=timestamp, price=price, volume=volume)
        return await self.pipeline.process_tick(tick)

    async def run(self, ticks: AsyncIterator[Tick]) -> int:
        """Process ticks until the source is exhausted; returns the count."""
        count = 0
        async for tick in ticks:
            await self.pipeline.process_tick(tick)
            count += 1
        return count


def read_ticks_csv(path: Path, symbols: set[str] | None = None) -> Iterator[Tick]:
    """Yield ticks from a CSV file, skipping malformed rows."""
    with open(path, newline="") as f:
        reader = csv.DictReader(f)
        for line_no, row in enumerate(reader, start=2):
            symbol = (row.get("symbol") or "").strip().upper()
            if symbols and symbol not in symbols:
                continue
            try:
                yield Tick(
                    symbol=symbol,
                    timestamp=float(row["timestamp"]),
                    price=float(row["price"]),
                    volume=float(row["volume"]),
                )
            except (KeyError, TypeError, ValueError, ValidationError) as e:
                logger.warning("Skipping malformed row %d in %s: %s", line_no, path, e)


async def _aiter(ticks: Iterator[Tick]) -> AsyncIterator[Tick]:
    for tick in ticks:
        yield tick


async def cmd_replay(args: argparse.Namespace, settings: Settings) -> None:
    service = TickwatchService(settings)
    if args.symbols:
        symbols = set(args.symbols.upper().split(","))
    else:
        symbols = {s.upper() for s in settings.symbols} or None

    await service.start()
    try:
        count = await service.run(_aiter(read_ticks_csv(Path(args.file), symbols)))
    finally:
        await service.stop()

    print(f"\nProcessed {count:,} ticks")
    for symbol in service.pipeline.symbols():
        signals = service.signal_log.recent(symbol=symbol)
        print(f"  {symbol}: {len(signals)} signals")
        for signal in signals:
            print(
                f"    {signal.signal_time:%Y-%m-%d %H:%M:%S} {signal.strategy:<9} "
                f"entry={signal.entry_price:.6f} tp={signal.take_profit:.6f} "
                f"sl={signal.stop_loss:.6f}"
            )


def cmd_show_conditions(args: argparse.Namespace, settings: Settings) -> None:
    store = load_conditions_config(settings.conditions_file).build_store()
    store.get_all_for_symbol(args.symbol.upper())
    print(store.export_json())


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Evaluate indicator-based strategy conditions on tick streams",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m tickwatch_app replay ticks.csv
  python -m tickwatch_app replay ticks.csv --symbols BTCUSDT,ETHUSDT
  python -m tickwatch_app show-conditions BTCUSDT
        """,
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    replay = sub.add_parser("replay", help="Replay ticks from a CSV file")
    replay.add_argument("file", help="CSV with symbol,timestamp,price,volume")
    replay.add_argument("--symbols", help="Comma-separated symbols to include (default: settings)")
    replay.add_argument(
        "--strategies", help="Comma-separated strategy kinds (default: settings)"
    )

    show = sub.add_parser("show-conditions", help="Print effective conditions")
    show.add_argument("symbol")

    return parser.parse_args(argv)


async def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    settings = get_settings()

    # Configure logging
    level = logging.DEBUG if args.verbose else getattr(
        logging, settings.log_level.upper(), logging.INFO
    )
    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    logging.getLogger("asyncio").setLevel(logging.WARNING)

    if args.command == "replay":
        if args.strategies:
            settings = settings.model_copy(
                update={"strategies": args.strategies.lower().split(",")}
            )
        await cmd_replay(args, settings)
    elif args.command == "show-conditions":
        cmd_show_conditions(args, settings)


def cli() -> None:
    asyncio.run(main())


if __name__ == "__main__":
    cli()
