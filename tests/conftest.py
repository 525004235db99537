"""
Pytest fixtures for the detector tests.

FakeLedger answers Solana JSON-RPC and SNS search requests through an
httpx.MockTransport, so the orchestrators and the API run without network.

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

import json
from typing import Dict, Iterable, List, Optional

import httpx
import pytest

from dust_detector.config import SYSTEM_PROGRAM_ID, AnalysisThresholds
from dust_detector.models import TransactionRecord

WALLET = "9xQeWvG816bUx9EPjHmaT23yvVM2ZWbrrpZb9PusVFin"
SENDER = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"
TOKEN_PROGRAM = "TokenkegQfeZyiNwAJbNbGKPFXCWuBvf9Ss623VQ5DA"

_BASE58 = "123456789ABCDEFGHJKLMNPQRSTUVWXYZabcdefghijkmnopqrstuvwxyz"


def make_signature(i: int) -> str:
    """Distinct, well-formed 88 character signature."""
    return _BASE58[i % 58] + _BASE58[(i // 58) % 58] + "5" * 86


def make_record(
    i: int = 0,
    pre: Optional[int] = 1_000_000_000,
    post: Optional[int] = 999_999_000,
    block_time: Optional[int] = 1_700_000_000,
    receiver: Optional[str] = None,
    program_id: str = SYSTEM_PROGRAM_ID,
    is_token_transfer: bool = False,
) -> TransactionRecord:
    keys = [WALLET]
    if receiver is not None:
        keys.append(receiver)
    return TransactionRecord(
        signature=make_signature(i),
        block_time=block_time,
        pre_balance=pre,
        post_balance=post,
        account_keys=keys,
        program_ids=[program_id],
        is_token_transfer=is_token_transfer,
    )


def make_raw_transaction(
    pre: int,
    post: int,
    account_keys: List[str],
    block_time: Optional[int] = 1_700_000_000,
    program_index: int = 2,
    logs: Optional[List[str]] = None,
) -> dict:
    """getTransaction result in "json" encoding."""
    return {
        "blockTime": block_time,
        "slot": 250_000_000,
        "meta": {
            "err": None,
            "fee": 5000,
            "preBalances": [pre] + [0] * (len(account_keys) - 1),
            "postBalances": [post] + [0] * (len(account_keys) - 1),
            "logMessages": logs or [],
        },
        "transaction": {
            "signatures": ["placeholder"],
            "message": {
                "accountKeys": account_keys,
                "instructions": [
                    {"programIdIndex": program_index, "accounts": [0, 1], "data": "3Bxs4h24hBtQy9rw"},
                ],
            },
        },
    }


def dust_transfer(receiver: str, block_time: int, lamports: int = 1000) -> dict:
    """Plain System Program transfer of `lamports` out of WALLET."""
    return make_raw_transaction(
        pre=5_000_000_000,
        post=5_000_000_000 - lamports,
        account_keys=[WALLET, receiver, SYSTEM_PROGRAM_ID],
        block_time=block_time,
    )


class FakeLedger:
    """In-memory Solana RPC + SNS search backend."""

    def __init__(
        self,
        transactions: Optional[Dict[str, dict]] = None,
        domains: Optional[Dict[str, List[str]]] = None,
        failing: Iterable[str] = (),
        sns_down: bool = False,
        rpc_down: bool = False,
        rpc_body=None,
    ):
        # Insertion order of `transactions` is the newest-first signature list
        self.transactions = transactions or {}
        self.domains = domains or {}
        self.failing = set(failing)
        self.sns_down = sns_down
        self.rpc_down = rpc_down
        # Served verbatim for every RPC call when set
        self.rpc_body = rpc_body
        self.requests: List[httpx.Request] = []

    def _rpc(self, result) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": result})

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)

        if request.method == "GET":
            if self.sns_down:
                return httpx.Response(503, text="unavailable")
            query = request.url.params.get("searchQuery")
            return httpx.Response(200, json={
                "labelSearch": [
                    {"document": {"entityType": "Domains", "name": name}}
                    for name in self.domains.get(query, [])
                ],
            })

        if self.rpc_down:
            return httpx.Response(502, text="bad gateway")
        if self.rpc_body is not None:
            return httpx.Response(200, json=self.rpc_body)

        payload = json.loads(request.content)
        method, params = payload["method"], payload["params"]

        if method == "getSignaturesForAddress":
            limit = params[1]["limit"]
            infos = [
                {"signature": sig, "blockTime": tx.get("blockTime"), "err": None}
                for sig, tx in self.transactions.items()
            ]
            return self._rpc(infos[:limit])

        if method == "getTransaction":
            signature = params[0]
            if signature in self.failing:
                return httpx.Response(500, text="internal error")
            return self._rpc(self.transactions.get(signature))

        return httpx.Response(200, json={
            "jsonrpc": "2.0", "id": 1, "error": {"code": -32601, "message": "Method not found"},
        })

    def client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))


@pytest.fixture
def thresholds():
    return AnalysisThresholds()


@pytest.fixture
def dusting_history():
    """Twelve dust transfers to distinct recipients inside one second."""
    return {
        make_signature(i): dust_transfer(f"recipient-{i:02d}", 1_700_000_001 if i < 6 else 1_700_000_000)
        for i in range(12)
    }
