"""
Solana dust & address poisoning detection engine.

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

from .analyzer import (
    analyze_transaction,
    analyze_wallet,
    filter_safe_transactions,
    split_safe_transactions,
)
from .config import DEFAULT_THRESHOLDS, DEFAULT_WEIGHTS, AnalysisThresholds, ScoreWeights
from .exceptions import InvalidInputError
from .models import (
    RiskLevel,
    SafeTransactionsResult,
    TransactionAnalysisResult,
    TransactionRecord,
    WalletAnalysisResult,
)

__version__ = "1.1.0"

__all__ = [
    "AnalysisThresholds",
    "DEFAULT_THRESHOLDS",
    "DEFAULT_WEIGHTS",
    "InvalidInputError",
    "RiskLevel",
    "SafeTransactionsResult",
    "ScoreWeights",
    "TransactionAnalysisResult",
    "TransactionRecord",
    "WalletAnalysisResult",
    "analyze_transaction",
    "analyze_wallet",
    "filter_safe_transactions",
    "split_safe_transactions",
]
