"""
Configuration for the dust & address poisoning detector.

Process settings are read from environment variables once at import time.
Detection policy (thresholds, score weights, keyword table) is immutable data
passed into every analysis call, so callers and tests can swap it freely.

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

import os
from typing import Tuple

from pydantic import BaseModel, ConfigDict, Field

# Environment variables
HELIUS_API_KEY = os.getenv("HELIUS_API_KEY", "")
SOLANA_RPC_URL = os.getenv("SOLANA_RPC_URL", "https://api.mainnet-beta.solana.com")
SNS_SEARCH_URL = os.getenv("SNS_SEARCH_URL", "https://socials.solana.fm/search")
HTTP_TIMEOUT = float(os.getenv("HTTP_TIMEOUT", "30.0"))
TRANSACTION_FETCH_LIMIT = int(os.getenv("TRANSACTION_FETCH_LIMIT", "10"))
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

# Ledger constants
LAMPORTS_PER_SOL = 1_000_000_000
SYSTEM_PROGRAM_ID = "11111111111111111111111111111111"
TOKEN_PROGRAM_IDS = frozenset({
    "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA",  # SPL Token
    "TokenzQdBNbLqP5VEhdkAS6EPFLC1PHnBqCXEpPxuEb",  # Token-2022
})


def get_rpc_url() -> str:
    """RPC endpoint, preferring Helius when an API key is configured."""
    if HELIUS_API_KEY:
        return f"https://mainnet.helius-rpc.com/?api-key={HELIUS_API_KEY}"
    return SOLANA_RPC_URL


class AnalysisThresholds(BaseModel):
    """Numeric policy for one evaluation."""
    model_config = ConfigDict(frozen=True)

    min_tps: float = Field(default=5.0, ge=0.0)
    min_dust_transactions: int = Field(default=9, ge=0)
    dust_amount_sol: float = Field(default=0.0001, gt=0.0)  # Strictly below this is dust
    min_unique_recipients: int = Field(default=9, ge=0)
    min_transactions_checked: int = Field(default=10, ge=0)
    similarity_threshold: float = Field(default=0.8, ge=0.0, le=1.0)


class ScoreWeights(BaseModel):
    """Points contributed by each fired signal."""
    model_config = ConfigDict(frozen=True)

    domain_suspicious: int = 30
    domain_emoji: int = 20
    high_tps: int = 40
    high_dust_count: int = 20
    high_unique_recipients: int = 10
    dust_amount: int = 50
    token_transfer_cap: int = 20


DEFAULT_THRESHOLDS = AnalysisThresholds(
    min_tps=float(os.getenv("DUST_MIN_TPS", "5")),
    min_dust_transactions=int(os.getenv("DUST_MIN_DUST_TRANSACTIONS", "9")),
    dust_amount_sol=float(os.getenv("DUST_AMOUNT_SOL", "0.0001")),
    min_unique_recipients=int(os.getenv("DUST_MIN_UNIQUE_RECIPIENTS", "9")),
    min_transactions_checked=int(os.getenv("DUST_MIN_TRANSACTIONS_CHECKED", "10")),
    similarity_threshold=float(os.getenv("ADDRESS_SIMILARITY_THRESHOLD", "0.8")),
)

DEFAULT_WEIGHTS = ScoreWeights()

# Substrings seen in SNS names used by dusting campaigns
SUSPICIOUS_DOMAIN_KEYWORDS: Tuple[str, ...] = (
    # Gambling / casino
    "flip.gg", "casino", "bet", "gambling", "slot", "poker", "roulette", "jackpot", "win",
    "lucky", "fortune", "chance", "dice", "card", "game", "play", "spin", "roll",
    # Airdrop / free token
    "airdrop", "free", "claim", "bonus", "reward", "giveaway", "gift", "prize", "token",
    "drop", "distribution", "whitelist", "presale", "ico", "ido", "launch", "mint",
    # Scam actions
    "verify", "validation", "confirm", "secure", "wallet", "connect", "sign", "approve",
    "update", "upgrade", "maintenance", "support", "help", "assist", "recover", "restore",
    # Urgency
    "hurry", "limited", "expire", "ending", "last", "final", "urgent", "immediate",
    "now", "today", "tonight", "soon", "quick", "fast", "instant", "rush",
    # Financial incentives
    "profit", "earn", "income", "revenue", "dividend", "interest", "yield", "return",
    "investment", "trading", "market", "price", "value", "worth", "rich", "wealth",
    # Suspicious actions
    "click", "tap", "press", "enter", "submit", "send", "transfer", "move", "swap",
    "exchange", "convert", "bridge", "cross", "migrate", "import", "export",
    # Crypto asset names
    "eth", "ethereum", "btc", "bitcoin", "crypto", "defi", "nft",
    "blockchain", "finance",
)
