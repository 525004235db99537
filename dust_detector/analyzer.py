"""
Analysis orchestration: wallet mode, transaction mode and the safe
transaction filter.

Each call validates its identifier, pulls what it can from the ledger and the
SNS search, and hands the records to the pure detectors. Lookup failures only
remove data; the only error that escapes is InvalidInputError, raised before
any request goes out.

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

import asyncio
import logging
from typing import List, Optional, Sequence, Tuple

import httpx

from .config import (
    DEFAULT_THRESHOLDS,
    DEFAULT_WEIGHTS,
    SUSPICIOUS_DOMAIN_KEYWORDS,
    TRANSACTION_FETCH_LIMIT,
    AnalysisThresholds,
    ScoreWeights,
)
from .domains import select_suspicious_domain
from .metrics import aggregate_metrics, has_enough_transactions
from .models import (
    DustingMetrics,
    RiskLevel,
    SafeTransactionsResult,
    SuspiciousDomain,
    TransactionAnalysisResult,
    TransactionRecord,
    TransactionSummary,
    WalletAnalysisResult,
    validate_address,
    validate_signature,
)
from .scoring import (
    build_transaction_signals,
    build_wallet_signals,
    score_transaction,
    score_wallet,
)
from .similarity import poisoning_flags
from .sns_client import get_domains
from .solana_client import fetch_transactions, get_signatures, get_transaction

logger = logging.getLogger(__name__)


def _fetch_limit(thresholds: AnalysisThresholds, limit: Optional[int]) -> int:
    if limit is not None:
        return limit
    return max(TRANSACTION_FETCH_LIMIT, thresholds.min_transactions_checked)


def _insufficient_wallet_result(
    address: str,
    checked: int,
    suspicious_sns: Optional[SuspiciousDomain],
) -> WalletAnalysisResult:
    logger.info(f"Only {checked} transactions for {address}; returning low risk")
    return WalletAnalysisResult(
        address=address,
        confidence=0,
        raw_confidence=0,
        risk_level=RiskLevel.LOW,
        is_flagged=False,
        suspicious_patterns=[],
        metrics=DustingMetrics(
            total_transactions_checked=checked,
            suspicious_sns=suspicious_sns,
        ),
    )


async def analyze_wallet(
    address: str,
    client: httpx.AsyncClient,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    keywords: Sequence[str] = SUSPICIOUS_DOMAIN_KEYWORDS,
    limit: Optional[int] = None,
) -> WalletAnalysisResult:
    """Analyze a wallet's recent history for dusting behaviour."""
    validate_address(address)

    domains, signature_infos = await asyncio.gather(
        get_domains(address, client),
        get_signatures(address, client, _fetch_limit(thresholds, limit)),
    )
    suspicious_sns = select_suspicious_domain(domains, keywords)

    if not has_enough_transactions(len(signature_infos), thresholds):
        return _insufficient_wallet_result(address, len(signature_infos), suspicious_sns)

    records = await fetch_transactions(signature_infos, client)
    if not has_enough_transactions(len(records), thresholds):
        return _insufficient_wallet_result(address, len(records), suspicious_sns)

    metrics = aggregate_metrics(records, thresholds, suspicious_sns)
    score = score_wallet(build_wallet_signals(metrics, thresholds), weights)

    logger.info(
        f"Wallet {address}: confidence={score.raw_confidence}, "
        f"risk={score.risk_level.value}, flagged={score.is_flagged}"
    )
    return WalletAnalysisResult(
        address=address,
        confidence=score.confidence,
        raw_confidence=score.raw_confidence,
        risk_level=score.risk_level,
        is_flagged=score.is_flagged,
        suspicious_patterns=score.suspicious_patterns,
        metrics=metrics,
    )


async def analyze_transaction(
    signature: str,
    client: httpx.AsyncClient,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    keywords: Sequence[str] = SUSPICIOUS_DOMAIN_KEYWORDS,
) -> TransactionAnalysisResult:
    """Analyze one transaction: its amount and its sender's SNS names."""
    validate_signature(signature)

    record = await get_transaction(signature, client)
    if record is None:
        return TransactionAnalysisResult(
            signature=signature,
            found=False,
            confidence=0,
            raw_confidence=0,
            risk_level=RiskLevel.LOW,
            is_flagged=False,
        )

    sender_sns = None
    if record.sender:
        sender_sns = select_suspicious_domain(await get_domains(record.sender, client), keywords)

    signals = build_transaction_signals(record, sender_sns, thresholds)
    score = score_transaction(signals, weights, record.is_token_transfer)

    logger.info(
        f"Transaction {signature}: confidence={score.raw_confidence}, "
        f"risk={score.risk_level.value}, token_transfer={record.is_token_transfer}"
    )
    return TransactionAnalysisResult(
        signature=signature,
        found=True,
        confidence=score.confidence,
        raw_confidence=score.raw_confidence,
        risk_level=score.risk_level,
        is_flagged=score.is_flagged,
        suspicious_patterns=score.suspicious_patterns,
        transaction=TransactionSummary.from_record(record),
        sender_sns=sender_sns,
        is_token_transfer=record.is_token_transfer,
    )


def split_safe_transactions(
    records: Sequence[TransactionRecord],
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
) -> Tuple[List[TransactionRecord], List[str]]:
    """
    Return (safe records, lookalike counterparties).

    Records without balances or a counterparty are dropped outright. The rest
    are scanned in order; a record is safe when its amount is not dust and its
    counterparty does not imitate one seen earlier in the scan.
    """
    usable = [r for r in records if r.has_balances and r.receiver]
    counterparties = [r.receiver for r in usable]
    flags = poisoning_flags(counterparties, thresholds.similarity_threshold)

    safe = [
        record
        for record, poisoned in zip(usable, flags)
        if not poisoned and record.amount_sol >= thresholds.dust_amount_sol
    ]
    poisoning = list(dict.fromkeys(c for c, poisoned in zip(counterparties, flags) if poisoned))
    return safe, poisoning


async def filter_safe_transactions(
    address: str,
    client: httpx.AsyncClient,
    thresholds: AnalysisThresholds = DEFAULT_THRESHOLDS,
    limit: Optional[int] = None,
) -> SafeTransactionsResult:
    """Recent transactions of a wallet minus dust and lookalike transfers."""
    validate_address(address)

    signature_infos = await get_signatures(address, client, _fetch_limit(thresholds, limit))
    records = await fetch_transactions(signature_infos, client)
    safe, poisoning = split_safe_transactions(records, thresholds)

    logger.info(f"Filter {address}: {len(safe)} of {len(records)} transactions kept")
    return SafeTransactionsResult(
        address=address,
        safe_transactions=[TransactionSummary.from_record(r) for r in safe],
        total_transactions=len(records),
        safe_transactions_count=len(safe),
        filtered_transactions_count=len(records) - len(safe),
        poisoning_addresses=poisoning,
    )
