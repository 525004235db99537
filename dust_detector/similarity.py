"""
Address similarity and address poisoning checks.

Similarity is 1 - (Levenshtein distance / longer length). A lookalike address
is one whose similarity to an address seen earlier in the same scan is above
the configured threshold.

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
from typing import Iterable, List, Sequence

import Levenshtein

logger = logging.getLogger(__name__)


def address_similarity(first: str, second: str) -> float:
    """Return similarity in [0, 1]; 1.0 means identical."""
    max_len = max(len(first), len(second))
    if max_len == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(first, second) / max_len


def is_address_poisoning(address: str, seen_addresses: Iterable[str], threshold: float) -> bool:
    """True if `address` looks like any previously seen address."""
    return any(address_similarity(address, seen) > threshold for seen in seen_addresses)


def poisoning_flags(addresses: Sequence[str], threshold: float) -> List[bool]:
    """
    Scan addresses in order, flagging each one that imitates an earlier one.

    Each address is checked before it joins the seen list, so the first member
    of a lookalike cluster is never flagged.
    """
    seen: List[str] = []
    flags: List[bool] = []
    for address in addresses:
        flagged = is_address_poisoning(address, seen, threshold)
        if flagged:
            logger.debug(f"Lookalike address detected: {address}")
        flags.append(flagged)
        seen.append(address)
    return flags


def find_poisoning_addresses(addresses: Sequence[str], threshold: float) -> List[str]:
    flags = poisoning_flags(addresses, threshold)
    return [address for address, flagged in zip(addresses, flags) if flagged]
