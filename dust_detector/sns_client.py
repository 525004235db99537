"""
SNS domain lookup through the Solana.fm socials search API.

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
from typing import Any, List

import httpx

from .config import SNS_SEARCH_URL

logger = logging.getLogger(__name__)

SNS_HEADERS = {
    "accept": "application/json",
    "origin": "https://solana.fm",
    "referer": "https://solana.fm/",
}


def extract_domains(data: Any) -> List[str]:
    """Pull domain names out of a search response, preserving order."""
    if not isinstance(data, dict):
        return []
    domains = []
    for item in data.get("labelSearch") or []:
        document = item.get("document") if isinstance(item, dict) else None
        if not isinstance(document, dict) or document.get("entityType") != "Domains":
            continue
        name = document.get("name")
        if name:
            domains.append(name)
    return domains


async def get_domains(address: str, client: httpx.AsyncClient) -> List[str]:
    """Domains registered to an address; empty when the lookup fails."""
    try:
        response = await client.get(
            SNS_SEARCH_URL,
            params={"searchQuery": address, "network": "Mainnet"},
            headers=SNS_HEADERS,
        )
        response.raise_for_status()
        domains = extract_domains(response.json())
    except (httpx.HTTPError, ValueError) as e:
        logger.error(f"Error checking SNS for {address}: {str(e)}")
        return []

    logger.info(f"Found {len(domains)} domains for {address}")
    return domains
