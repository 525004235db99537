"""
Data models shared by the detectors, the orchestrators and the API layer.

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

import datetime
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from .config import LAMPORTS_PER_SOL, SYSTEM_PROGRAM_ID
from .exceptions import InvalidInputError

BASE58_PATTERN = re.compile(r"^[1-9A-HJ-NP-Za-km-z]+$")


def _utcnow() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


# -------------------- Identifiers --------------------

class SolanaAddress(BaseModel):
    """Solana public key / address."""
    address: str

    @field_validator("address")
    @classmethod
    def validate_solana_address(cls, v):
        if not (32 <= len(v) <= 44) or not BASE58_PATTERN.match(v):
            raise ValueError("Invalid Solana address format")
        return v


class TransactionSignature(BaseModel):
    """Solana transaction signature."""
    signature: str

    @field_validator("signature")
    @classmethod
    def validate_tx_signature(cls, v):
        if not (64 <= len(v) <= 88) or not BASE58_PATTERN.match(v):
            raise ValueError("Invalid Solana transaction signature format")
        return v


def validate_address(address: str) -> str:
    try:
        return SolanaAddress(address=address).address
    except ValidationError as e:
        raise InvalidInputError(f"Invalid Solana address: {address!r}") from e


def validate_signature(signature: str) -> str:
    try:
        return TransactionSignature(signature=signature).signature
    except ValidationError as e:
        raise InvalidInputError(f"Invalid transaction signature: {signature!r}") from e


# -------------------- Requests --------------------

class MultiAddressAnalysisRequest(BaseModel):
    """Request for analyzing multiple wallets."""
    addresses: List[str] = Field(min_length=1, max_length=20)


class TransactionAnalysisRequest(BaseModel):
    """Request for analyzing a set of transaction signatures."""
    signatures: List[str] = Field(min_length=1, max_length=20)


# -------------------- Ledger records --------------------

class TransactionRecord(BaseModel):
    """
    One transaction as seen from its primary account (account index 0).

    Balances are lamports and may be absent when the ledger omits metadata;
    amount-based signals must skip such records rather than read them as zero.
    """
    model_config = ConfigDict(frozen=True)

    signature: str
    block_time: Optional[int] = None
    pre_balance: Optional[int] = Field(default=None, ge=0)
    post_balance: Optional[int] = Field(default=None, ge=0)
    account_keys: List[str] = Field(default_factory=list)
    program_ids: List[str] = Field(default_factory=list)
    is_token_transfer: bool = False

    @property
    def has_balances(self) -> bool:
        return self.pre_balance is not None and self.post_balance is not None

    @property
    def amount_sol(self) -> Optional[float]:
        """Absolute balance delta in SOL, None if a balance is missing."""
        if not self.has_balances:
            return None
        return abs(self.pre_balance - self.post_balance) / LAMPORTS_PER_SOL

    @property
    def sender(self) -> Optional[str]:
        return self.account_keys[0] if self.account_keys else None

    @property
    def receiver(self) -> Optional[str]:
        return self.account_keys[1] if len(self.account_keys) > 1 else None

    @property
    def direction(self) -> str:
        if self.has_balances and self.pre_balance > self.post_balance:
            return "SEND"
        return "RECEIVE"

    @property
    def is_plain_transfer(self) -> bool:
        # First instruction goes to the System Program: a native SOL transfer
        return bool(self.program_ids) and self.program_ids[0] == SYSTEM_PROGRAM_ID


class SuspiciousDomain(BaseModel):
    """SNS name selected as suspicious for an address."""
    model_config = ConfigDict(frozen=True)

    name: str
    has_suspicious_pattern: bool
    contains_emojis: bool


# -------------------- Signals & scores --------------------

class RiskLevel(str, Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class SignalSet(BaseModel):
    """Independent detector outputs for a single evaluation."""
    model_config = ConfigDict(frozen=True)

    domain_suspicious: bool = False
    domain_has_emoji: bool = False
    high_tps: bool = False
    high_dust_count: bool = False
    high_unique_recipients: bool = False
    dust_amount_below_threshold: bool = False

    # Observed values, quoted in the audit trail
    domain_name: Optional[str] = None
    tps: float = 0.0
    dust_transactions: int = 0
    unique_recipients: int = 0
    amount_sol: Optional[float] = None


class RiskScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    confidence: int = Field(ge=0, le=100)
    raw_confidence: int = Field(ge=0)
    risk_level: RiskLevel
    is_flagged: bool
    suspicious_patterns: List[str] = Field(default_factory=list)


# -------------------- Results --------------------

class DustingMetrics(BaseModel):
    model_config = ConfigDict(frozen=True)

    tps: float = 0.0
    dust_transactions: int = 0
    total_transactions_checked: int = 0
    unique_recipients: int = 0
    average_dust_amount: float = 0.0
    suspicious_sns: Optional[SuspiciousDomain] = None


class WalletAnalysisResult(BaseModel):
    """Verdict for one wallet's recent history."""
    model_config = ConfigDict(frozen=True)

    address: str
    confidence: int = Field(ge=0, le=100)
    raw_confidence: int = Field(ge=0)
    risk_level: RiskLevel
    is_flagged: bool
    suspicious_patterns: List[str] = Field(default_factory=list)
    metrics: DustingMetrics
    timestamp: str = Field(default_factory=_utcnow)


class TransactionSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    signature: str
    timestamp: int = 0
    amount: Optional[float] = None
    sender: Optional[str] = None
    receiver: Optional[str] = None
    type: str = Field(description="One of: 'SEND', 'RECEIVE'")

    @classmethod
    def from_record(cls, record: TransactionRecord) -> "TransactionSummary":
        return cls(
            signature=record.signature,
            timestamp=record.block_time or 0,
            amount=record.amount_sol,
            sender=record.sender,
            receiver=record.receiver,
            type=record.direction,
        )


class TransactionAnalysisResult(BaseModel):
    """Verdict for a single transaction."""
    model_config = ConfigDict(frozen=True)

    signature: str
    found: bool
    confidence: int = Field(ge=0, le=100)
    raw_confidence: int = Field(ge=0)
    risk_level: RiskLevel
    is_flagged: bool
    suspicious_patterns: List[str] = Field(default_factory=list)
    transaction: Optional[TransactionSummary] = None
    sender_sns: Optional[SuspiciousDomain] = None
    is_token_transfer: bool = False
    timestamp: str = Field(default_factory=_utcnow)


class SafeTransactionsResult(BaseModel):
    """Recent history with dust and lookalike-address transfers removed."""
    model_config = ConfigDict(frozen=True)

    address: str
    safe_transactions: List[TransactionSummary] = Field(default_factory=list)
    total_transactions: int = 0
    safe_transactions_count: int = 0
    filtered_transactions_count: int = 0
    poisoning_addresses: List[str] = Field(default_factory=list)
