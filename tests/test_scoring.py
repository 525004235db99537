"""
Tests for signal construction, confidence and risk tiers.

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

from __future__ import annotations

from conftest import make_record
from dust_detector.config import AnalysisThresholds, ScoreWeights
from dust_detector.models import DustingMetrics, RiskLevel, SignalSet, SuspiciousDomain
from dust_detector.scoring import (
    WALLET_RISK_TIERS,
    build_transaction_signals,
    build_wallet_signals,
    classify_risk,
    score_transaction,
    score_wallet,
)

SPAM_SNS = SuspiciousDomain(name="🎉lucky.sol", has_suspicious_pattern=True, contains_emojis=True)


def wallet_signals(**kwargs) -> SignalSet:
    defaults = {"tps": 12.0, "dust_transactions": 12, "unique_recipients": 12, "domain_name": "🎉lucky.sol"}
    defaults.update(kwargs)
    return SignalSet(**defaults)


class TestWalletSignals:
    def test_threshold_equality_does_not_fire(self, thresholds):
        metrics = DustingMetrics(tps=5.0, dust_transactions=9, unique_recipients=9)
        signals = build_wallet_signals(metrics, thresholds)
        assert not signals.high_tps
        assert not signals.high_dust_count
        assert not signals.high_unique_recipients

    def test_exceeding_thresholds(self, thresholds):
        metrics = DustingMetrics(tps=5.5, dust_transactions=10, unique_recipients=10, suspicious_sns=SPAM_SNS)
        signals = build_wallet_signals(metrics, thresholds)
        assert signals.high_tps and signals.high_dust_count and signals.high_unique_recipients
        assert signals.domain_suspicious and signals.domain_has_emoji
        assert signals.domain_name == "🎉lucky.sol"

    def test_substituted_thresholds(self):
        metrics = DustingMetrics(tps=2.0, dust_transactions=3, unique_recipients=3)
        signals = build_wallet_signals(metrics, AnalysisThresholds(min_tps=1, min_dust_transactions=2))
        assert signals.high_tps and signals.high_dust_count
        assert not signals.high_unique_recipients


class TestWalletScore:
    def test_no_signals(self):
        score = score_wallet(SignalSet())
        assert score.confidence == 0
        assert score.risk_level == RiskLevel.LOW
        assert score.is_flagged is False
        assert score.suspicious_patterns == []

    def test_all_signals(self):
        score = score_wallet(wallet_signals(
            domain_suspicious=True, domain_has_emoji=True,
            high_tps=True, high_dust_count=True, high_unique_recipients=True,
        ))
        assert score.raw_confidence == 120
        assert score.confidence == 100
        assert score.risk_level == RiskLevel.CRITICAL
        assert score.is_flagged is True
        assert score.suspicious_patterns == [
            "Suspicious SNS name: 🎉lucky.sol",
            "SNS contains emojis",
            "High TPS detected: 12.00",
            "High number of dust transactions: 12",
            "Multiple unique recipients: 12",
        ]

    def test_critical_requires_both_volume_signals(self):
        # 30 + 20 + 40 = 90 but no dust-count signal
        score = score_wallet(wallet_signals(domain_suspicious=True, domain_has_emoji=True, high_tps=True))
        assert score.confidence == 90
        assert score.risk_level == RiskLevel.HIGH

    def test_high(self):
        score = score_wallet(wallet_signals(high_tps=True, high_dust_count=True))
        assert score.confidence == 60
        assert score.risk_level == RiskLevel.HIGH
        assert score.is_flagged is True

    def test_medium_is_not_flagged(self):
        score = score_wallet(wallet_signals(high_tps=True))
        assert score.confidence == 40
        assert score.risk_level == RiskLevel.MEDIUM
        assert score.is_flagged is False

    def test_domain_alone_stays_low(self):
        score = score_wallet(wallet_signals(domain_suspicious=True, domain_has_emoji=True))
        assert score.confidence == 50
        assert score.risk_level == RiskLevel.LOW

    def test_unique_recipients_alone(self):
        score = score_wallet(wallet_signals(high_dust_count=True, high_unique_recipients=True))
        assert score.confidence == 30
        assert score.risk_level == RiskLevel.MEDIUM

    def test_custom_weights(self):
        weights = ScoreWeights(high_tps=80)
        score = score_wallet(wallet_signals(high_tps=True, high_dust_count=True), weights)
        assert score.confidence == 100
        assert score.risk_level == RiskLevel.CRITICAL

    def test_idempotent(self):
        signals = wallet_signals(high_tps=True, high_dust_count=True, domain_suspicious=True)
        assert score_wallet(signals) == score_wallet(signals)


def test_classify_first_match_wins():
    signals = SignalSet(high_tps=True, high_dust_count=True)
    assert classify_risk(100, signals, WALLET_RISK_TIERS) == RiskLevel.CRITICAL
    assert classify_risk(79, signals, WALLET_RISK_TIERS) == RiskLevel.HIGH
    assert classify_risk(59, signals, WALLET_RISK_TIERS) == RiskLevel.MEDIUM
    assert classify_risk(29, signals, WALLET_RISK_TIERS) == RiskLevel.LOW


class TestTransactionScore:
    def test_dust_amount_signal(self, thresholds):
        signals = build_transaction_signals(make_record(), None, thresholds)
        assert signals.dust_amount_below_threshold is True
        score = score_transaction(signals)
        assert score.confidence == 50
        assert score.risk_level == RiskLevel.MEDIUM
        assert score.suspicious_patterns == ["Dust amount detected: 0.000001 SOL"]

    def test_dust_amount_is_fixed_point(self, thresholds):
        record = make_record(pre=1_000_000_000, post=999_950_000)
        score = score_transaction(build_transaction_signals(record, None, thresholds))
        assert score.suspicious_patterns == ["Dust amount detected: 0.00005 SOL"]

    def test_dust_with_spam_sender_is_critical(self, thresholds):
        signals = build_transaction_signals(make_record(), SPAM_SNS, thresholds)
        score = score_transaction(signals)
        assert score.confidence == 100
        assert score.risk_level == RiskLevel.CRITICAL
        assert score.is_flagged is True

    def test_regular_amount(self, thresholds):
        signals = build_transaction_signals(make_record(post=0), None, thresholds)
        score = score_transaction(signals)
        assert score.confidence == 0
        assert score.risk_level == RiskLevel.LOW

    def test_missing_balance_never_dust(self, thresholds):
        signals = build_transaction_signals(make_record(pre=None), None, thresholds)
        assert signals.dust_amount_below_threshold is False
        assert signals.amount_sol is None

    def test_token_transfer_forced_low(self, thresholds):
        record = make_record(is_token_transfer=True)
        signals = build_transaction_signals(record, SPAM_SNS, thresholds)
        assert signals.dust_amount_below_threshold is False

        # Even a hand-built signal set with every flag set stays LOW
        loaded = signals.model_copy(update={"dust_amount_below_threshold": True})
        score = score_transaction(loaded, is_token_transfer=True)
        assert score.confidence <= 20
        assert score.raw_confidence <= 20
        assert score.risk_level == RiskLevel.LOW
        assert score.is_flagged is False
        assert not any(p.startswith("Dust amount") for p in score.suspicious_patterns)
