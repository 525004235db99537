"""
Solana JSON-RPC access.

Every lookup is best effort: transport failures, RPC errors and malformed
payloads are logged and turned into empty results so one bad response never
aborts an analysis.

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
from typing import Any, Dict, List, Optional

import httpx

from .config import TOKEN_PROGRAM_IDS, TRANSACTION_FETCH_LIMIT, get_rpc_url
from .models import TransactionRecord

logger = logging.getLogger(__name__)

FETCH_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, IndexError, AttributeError)


async def rpc_call(client: httpx.AsyncClient, method: str, params: List[Any]) -> Any:
    """Send one JSON-RPC request and return its `result` (None on RPC error)."""
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "method": method,
        "params": params,
    }
    response = await client.post(get_rpc_url(), json=payload)
    response.raise_for_status()
    data = response.json()

    if not isinstance(data, dict):
        logger.error(f"RPC {method} returned a non-object body: {data!r}")
        return None
    if "error" in data:
        logger.error(f"RPC {method} failed: {data['error']}")
        return None
    return data.get("result")


async def get_signatures(
    address: str,
    client: httpx.AsyncClient,
    limit: int = TRANSACTION_FETCH_LIMIT,
) -> List[Dict[str, Any]]:
    """Recent signatures for an address, newest first."""
    try:
        result = await rpc_call(client, "getSignaturesForAddress", [address, {"limit": limit}])
    except FETCH_ERRORS as e:
        logger.error(f"Error fetching signatures for {address}: {str(e)}")
        return []

    if not isinstance(result, list):
        logger.error(f"Unexpected signatures response for {address}: {result}")
        return []
    return [info for info in result if isinstance(info, dict) and info.get("signature")]


def _account_key(key: Any) -> str:
    # "json" encoding gives plain strings, "jsonParsed" gives {"pubkey": ...}
    if isinstance(key, dict):
        return key.get("pubkey", "")
    return str(key)


def _first_balance(balances: Any) -> Optional[int]:
    if isinstance(balances, list) and balances:
        return balances[0]
    return None


def parse_transaction(
    signature: str,
    data: Dict[str, Any],
    fallback_block_time: Optional[int] = None,
) -> TransactionRecord:
    """Build a TransactionRecord from a getTransaction result."""
    meta = data.get("meta") or {}
    message = data["transaction"]["message"]

    account_keys = [_account_key(key) for key in message.get("accountKeys", [])]

    program_ids = []
    for instruction in message.get("instructions", []):
        if "programIdIndex" in instruction:
            index = instruction["programIdIndex"]
            if 0 <= index < len(account_keys):
                program_ids.append(account_keys[index])
        elif "programId" in instruction:
            program_ids.append(instruction["programId"])

    log_messages = meta.get("logMessages") or []
    is_token_transfer = any(pid in TOKEN_PROGRAM_IDS for pid in program_ids) or any(
        token_program in log for log in log_messages for token_program in TOKEN_PROGRAM_IDS
    )

    block_time = data.get("blockTime")
    return TransactionRecord(
        signature=signature,
        block_time=block_time if block_time is not None else fallback_block_time,
        pre_balance=_first_balance(meta.get("preBalances")),
        post_balance=_first_balance(meta.get("postBalances")),
        account_keys=account_keys,
        program_ids=program_ids,
        is_token_transfer=is_token_transfer,
    )


async def get_transaction(
    signature: str,
    client: httpx.AsyncClient,
    fallback_block_time: Optional[int] = None,
) -> Optional[TransactionRecord]:
    """Get transaction details by signature."""
    try:
        result = await rpc_call(
            client,
            "getTransaction",
            [signature, {"encoding": "json", "maxSupportedTransactionVersion": 0}],
        )
        if not isinstance(result, dict) or not result:
            logger.error(f"Transaction not found: {signature}")
            return None
        return parse_transaction(signature, result, fallback_block_time)
    except FETCH_ERRORS as e:
        logger.error(f"Error getting transaction {signature}: {str(e)}")
        return None


async def fetch_transactions(
    signature_infos: List[Dict[str, Any]],
    client: httpx.AsyncClient,
) -> List[TransactionRecord]:
    """Fetch details for every signature in parallel, dropping failures."""
    results = await asyncio.gather(
        *(
            get_transaction(info["signature"], client, info.get("blockTime"))
            for info in signature_infos
        ),
        return_exceptions=True,
    )

    records = []
    for info, result in zip(signature_infos, results):
        if isinstance(result, BaseException):
            logger.error(f"Fetching {info['signature']} raised: {result!r}")
            continue
        if result is not None:
            records.append(result)

    dropped = len(signature_infos) - len(records)
    if dropped:
        logger.warning(f"{dropped} of {len(signature_infos)} transactions could not be fetched")
    return records
