"""JSONL trade store.

The store sits outside the analytics pipeline: callers load trades, run the
metrics, and save afterwards. ``save_async`` hands the write to a background
worker and returns a future.
"""

from __future__ import annotations

import json
import os
import tempfile
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Sequence

from perp_analytics.schemas import TradePayload, parse_trades
from perp_analytics.types import Trade
from perp_analytics.utils.logging import get_logger, log_store_event


class TradeStore:
    """One JSON object per line, one line per trade."""

    def __init__(self, path: Path) -> None:
        self._path = path
        self._executor: ThreadPoolExecutor | None = None
        self._logger = get_logger("perp_analytics.store")

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> list[Trade]:
        """Load all stored trades; a missing file is an empty store."""
        if not self._path.exists():
            return []
        rows = [
            json.loads(line)
            for line in self._path.read_text(encoding="utf-8").splitlines()
            if line.strip()
        ]
        trades = parse_trades(rows)
        log_store_event(self._logger, action="loaded", path=str(self._path), count=len(trades))
        return trades

    def save(self, trades: Sequence[Trade]) -> None:
        """Replace the stored set atomically."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{self._path.name}.",
            dir=self._path.parent,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                for trade in trades:
                    row = TradePayload.from_trade(trade).model_dump(mode="json")
                    f.write(json.dumps(row, ensure_ascii=True) + "\n")
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        log_store_event(self._logger, action="saved", path=str(self._path), count=len(trades))

    def save_async(self, trades: Sequence[Trade]) -> Future[None]:
        """Schedule ``save`` on a single background worker."""
        if self._executor is None:
            self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="trade-store")
        return self._executor.submit(self.save, list(trades))

    def close(self) -> None:
        """Wait for pending saves and stop the worker."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self) -> TradeStore:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
