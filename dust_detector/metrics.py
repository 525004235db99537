"""
Volume and rate statistics over a wallet's recent transactions.

Records arrive newest-first, as returned by getSignaturesForAddress. Records
with a missing balance are left out of the amount-based figures only.

MIT License

Copyright (c) 2025 Solana Dust Detection Project

Permission is hereby granted, free of charge, to any person obtaining a copy
of this software and associated documentation files (the "Software"), to deal
in the Software without restriction, including without limitation the rights
to use, copy, modify, merge, publish, distribute, sublicense, and/or sell
copies of the Software, and to permit persons to whom the Software is
furnished to do so, subject to the following conditions:

The above copyright notice and this permission notice shall be included in all
copies or substantial portions of the Software.

THE SOFTWARE IS PROVIDED "AS IS", WITHOUT WARRANTY OF ANY KIND, EXPRESS OR
IMPLIED, INCLUDING BUT NOT LIMITED TO THE WARRANTIES OF MERCHANTABILITY,
FITNESS FOR A PARTICULAR PURPOSE AND NONINFRINGEMENT. IN NO EVENT SHALL THE
AUTHORS OR COPYRIGHT HOLDERS BE LIABLE FOR ANY CLAIM, DAMAGES OR OTHER
LIABILITY, WHETHER IN AN ACTION OF CONTRACT, TORT OR OTHERWISE, ARISING FROM,
OUT OF OR IN CONNECTION WITH THE SOFTWARE OR THE USE OR OTHER DEALINGS IN THE
SOFTWARE.
"""

import logging
from typing import List, Optional, Sequence

from .config import AnalysisThresholds
from .models import DustingMetrics, SuspiciousDomain, TransactionRecord

logger = logging.getLogger(__name__)


def has_enough_transactions(count: int, thresholds: AnalysisThresholds) -> bool:
    """Below the minimum, statistics are not trusted."""
    return count >= thresholds.min_transactions_checked


def transactions_per_second(records: Sequence[TransactionRecord]) -> float:
    """Record count over the seconds between newest and oldest block time."""
    if not records:
        return 0.0
    newest = records[0].block_time
    oldest = records[-1].block_time
    if newest is None or oldest is None:
        return 0.0
    elapsed = newest - oldest
    if elapsed <= 0:
        return 0.0
    return len(records) / elapsed


def dust_amounts(records: Sequence[TransactionRecord], thresholds: AnalysisThresholds) -> List[float]:
    """Per-record SOL deltas strictly below the dust threshold."""
    amounts = []
    for record in records:
        amount = record.amount_sol
        if amount is None:
            logger.debug(f"Skipping {record.signature}: missing balances")
            continue
        if amount < thresholds.dust_amount_sol:
            amounts.append(amount)
    return amounts


def unique_recipients(records: Sequence[TransactionRecord]) -> int:
    """Distinct counterparties of plain System Program transfers."""
    recipients = {
        record.receiver
        for record in records
        if record.is_plain_transfer and record.receiver
    }
    return len(recipients)


def average(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    return sum(values) / len(values)


def aggregate_metrics(
    records: Sequence[TransactionRecord],
    thresholds: AnalysisThresholds,
    suspicious_sns: Optional[SuspiciousDomain] = None,
) -> DustingMetrics:
    dust = dust_amounts(records, thresholds)
    metrics = DustingMetrics(
        tps=transactions_per_second(records),
        dust_transactions=len(dust),
        total_transactions_checked=len(records),
        unique_recipients=unique_recipients(records),
        average_dust_amount=average(dust),
        suspicious_sns=suspicious_sns,
    )
    logger.info(
        f"Metrics over {metrics.total_transactions_checked} txs: tps={metrics.tps:.2f}, "
        f"dust={metrics.dust_transactions}, recipients={metrics.unique_recipients}"
    )
    return metrics
