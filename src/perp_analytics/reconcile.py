"""Reconciliation of live and persisted trade records."""

from __future__ import annotations

from typing import Iterable

from perp_analytics.types import Trade


def merge_trades(on_chain: Iterable[Trade], cloud: Iterable[Trade]) -> list[Trade]:
    """Merge two trade sources by id, newest entry first.

    On-chain records replace persisted records with the same id. Persisted
    records with no live counterpart (old closed trades) are kept.
    """
    by_id: dict[str, Trade] = {trade.id: trade for trade in cloud}
    for trade in on_chain:
        by_id[trade.id] = trade
    return sorted(by_id.values(), key=lambda trade: trade.entry_time, reverse=True)
