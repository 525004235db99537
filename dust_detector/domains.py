"""
SNS domain reputation checks.

A name is suspicious when it contains a known dusting keyword or an emoji.
Among several names for one address only the first suspicious one (in the
order the lookup returned them) is reported.

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
import re
from typing import Iterable, Optional, Sequence

from .config import SUSPICIOUS_DOMAIN_KEYWORDS
from .models import SuspiciousDomain

logger = logging.getLogger(__name__)

EMOJI_PATTERN = re.compile("[\U0001F300-\U0001F9FF]")


def has_suspicious_pattern(name: str, keywords: Sequence[str] = SUSPICIOUS_DOMAIN_KEYWORDS) -> bool:
    lowered = name.lower()
    return any(keyword.lower() in lowered for keyword in keywords)


def contains_emojis(name: str) -> bool:
    return EMOJI_PATTERN.search(name) is not None


def check_domain(name: str, keywords: Sequence[str] = SUSPICIOUS_DOMAIN_KEYWORDS) -> SuspiciousDomain:
    """Run both checks on a single name."""
    return SuspiciousDomain(
        name=name,
        has_suspicious_pattern=has_suspicious_pattern(name, keywords),
        contains_emojis=contains_emojis(name),
    )


def select_suspicious_domain(
    domains: Optional[Iterable[str]],
    keywords: Sequence[str] = SUSPICIOUS_DOMAIN_KEYWORDS,
) -> Optional[SuspiciousDomain]:
    """Return the first domain that trips either check, or None."""
    for name in domains or ():
        if not name:
            continue
        result = check_domain(name, keywords)
        if result.has_suspicious_pattern or result.contains_emojis:
            logger.info(
                f"Suspicious domain selected: {name} "
                f"(keywords={result.has_suspicious_pattern}, emojis={result.contains_emojis})"
            )
            return result
    return None
