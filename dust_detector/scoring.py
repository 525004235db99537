"""
Risk scoring.

Scoring model
-------------
Each fired signal adds its weight to the confidence (see ScoreWeights):

    suspicious SNS keyword  +30      high TPS                 +40
    SNS contains emojis     +20      high dust count          +20
    dust amount (tx mode)   +50      many unique recipients   +10

The risk tier is the first matching row of an ordered table. Only HIGH and
CRITICAL flag the subject. The summed confidence is kept as raw_confidence;
confidence is the same value saturated at 100.

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
from typing import Callable, List, Optional, Sequence, Tuple

from .config import DEFAULT_WEIGHTS, AnalysisThresholds, ScoreWeights
from .models import (
    DustingMetrics,
    RiskLevel,
    RiskScore,
    SignalSet,
    SuspiciousDomain,
    TransactionRecord,
)

logger = logging.getLogger(__name__)

TierRule = Tuple[Callable[[int, SignalSet], bool], RiskLevel]


def _volume_signal(signals: SignalSet) -> bool:
    return signals.high_tps or signals.high_dust_count


WALLET_RISK_TIERS: Sequence[TierRule] = (
    (lambda c, s: c >= 80 and s.high_tps and s.high_dust_count, RiskLevel.CRITICAL),
    (lambda c, s: c >= 60 and _volume_signal(s), RiskLevel.HIGH),
    (lambda c, s: c >= 30 and _volume_signal(s), RiskLevel.MEDIUM),
)

# A single transaction has no rate or volume signals to corroborate with
TRANSACTION_RISK_TIERS: Sequence[TierRule] = (
    (lambda c, s: c >= 80, RiskLevel.CRITICAL),
    (lambda c, s: c >= 60, RiskLevel.HIGH),
    (lambda c, s: c >= 30, RiskLevel.MEDIUM),
)

FLAGGED_LEVELS = frozenset({RiskLevel.HIGH, RiskLevel.CRITICAL})


def classify_risk(confidence: int, signals: SignalSet, tiers: Sequence[TierRule]) -> RiskLevel:
    for predicate, level in tiers:
        if predicate(confidence, signals):
            return level
    return RiskLevel.LOW


# -------------------- Signals --------------------

def _domain_signals(sns: Optional[SuspiciousDomain]) -> dict:
    if sns is None:
        return {}
    return {
        "domain_suspicious": sns.has_suspicious_pattern,
        "domain_has_emoji": sns.contains_emojis,
        "domain_name": sns.name,
    }


def build_wallet_signals(metrics: DustingMetrics, thresholds: AnalysisThresholds) -> SignalSet:
    """Compare wallet metrics against thresholds ("exceeds" is strict)."""
    return SignalSet(
        high_tps=metrics.tps > thresholds.min_tps,
        high_dust_count=metrics.dust_transactions > thresholds.min_dust_transactions,
        high_unique_recipients=metrics.unique_recipients > thresholds.min_unique_recipients,
        tps=metrics.tps,
        dust_transactions=metrics.dust_transactions,
        unique_recipients=metrics.unique_recipients,
        **_domain_signals(metrics.suspicious_sns),
    )


def build_transaction_signals(
    record: TransactionRecord,
    sender_sns: Optional[SuspiciousDomain],
    thresholds: AnalysisThresholds,
) -> SignalSet:
    amount = record.amount_sol
    is_dust = amount is not None and amount < thresholds.dust_amount_sol
    return SignalSet(
        dust_amount_below_threshold=is_dust and not record.is_token_transfer,
        amount_sol=amount,
        **_domain_signals(sender_sns),
    )


# -------------------- Scores --------------------

def _format_sol(amount: Optional[float]) -> str:
    # Lamport precision, no exponent notation
    if amount is None:
        return "unknown"
    return f"{amount:.9f}".rstrip("0").rstrip(".")


def _sum_signals(signals: SignalSet, weights: ScoreWeights) -> Tuple[int, List[str]]:
    """Add up fired signals and their audit trail, in fixed order."""
    confidence = 0
    patterns: List[str] = []

    if signals.domain_suspicious:
        confidence += weights.domain_suspicious
        patterns.append(f"Suspicious SNS name: {signals.domain_name}")
    if signals.domain_has_emoji:
        confidence += weights.domain_emoji
        patterns.append("SNS contains emojis")
    if signals.high_tps:
        confidence += weights.high_tps
        patterns.append(f"High TPS detected: {signals.tps:.2f}")
    if signals.high_dust_count:
        confidence += weights.high_dust_count
        patterns.append(f"High number of dust transactions: {signals.dust_transactions}")
    if signals.high_unique_recipients:
        confidence += weights.high_unique_recipients
        patterns.append(f"Multiple unique recipients: {signals.unique_recipients}")
    if signals.dust_amount_below_threshold:
        confidence += weights.dust_amount
        patterns.append(f"Dust amount detected: {_format_sol(signals.amount_sol)} SOL")

    return confidence, patterns


def _build_score(raw: int, level: RiskLevel, patterns: List[str]) -> RiskScore:
    return RiskScore(
        confidence=min(raw, 100),
        raw_confidence=raw,
        risk_level=level,
        is_flagged=level in FLAGGED_LEVELS,
        suspicious_patterns=patterns,
    )


def score_wallet(signals: SignalSet, weights: ScoreWeights = DEFAULT_WEIGHTS) -> RiskScore:
    raw, patterns = _sum_signals(signals, weights)
    level = classify_risk(raw, signals, WALLET_RISK_TIERS)
    if raw > 100:
        logger.warning(f"Wallet confidence {raw} exceeds 100; reporting saturated value")
    return _build_score(raw, level, patterns)


def score_transaction(
    signals: SignalSet,
    weights: ScoreWeights = DEFAULT_WEIGHTS,
    is_token_transfer: bool = False,
) -> RiskScore:
    """
    Score a single transaction.

    Dust economics do not apply to non-native assets: for token transfers the
    dust signal is dropped, confidence is capped and the tier forced to LOW.
    """
    if is_token_transfer:
        signals = signals.model_copy(update={"dust_amount_below_threshold": False})
    raw, patterns = _sum_signals(signals, weights)
    if is_token_transfer:
        raw = min(raw, weights.token_transfer_cap)
        return _build_score(raw, RiskLevel.LOW, patterns)
    return _build_score(raw, classify_risk(raw, signals, TRANSACTION_RISK_TIERS), patterns)
