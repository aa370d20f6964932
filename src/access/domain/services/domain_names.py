"""
Hostname helpers shared by the resolver and mapping writes
"""
from __future__ import annotations

import re
from typing import Final, Optional

from access.domain.exceptions import InvalidDomainError

MAX_DOMAIN_LENGTH: Final = 253

_LABEL: Final = r"[a-z0-9](?:[a-z0-9-]{0,61}[a-z0-9])?"
DOMAIN_REGEX: Final = re.compile(rf"^{_LABEL}(?:\.{_LABEL})*$", re.IGNORECASE)


def is_valid_domain(domain: str) -> bool:
    """Conservative hostname grammar: dot-separated alphanumeric labels, inner hyphens."""
    return len(domain) <= MAX_DOMAIN_LENGTH and DOMAIN_REGEX.match(domain) is not None


def normalize_domain(domain: str) -> str:
    """
    Lowercase and validate a domain for storage.

    Raises:
        InvalidDomainError: If the domain does not match the hostname grammar
    """
    candidate = (domain or "").strip().lower()
    if not is_valid_domain(candidate):
        raise InvalidDomainError(domain)
    return candidate


def extract_domain(email_or_domain: str) -> Optional[str]:
    """
    Domain part of an email address, or the input itself if it has no '@'.

    Returns None for empty input or an address with nothing after '@'.
    """
    value = (email_or_domain or "").strip().lower()
    if "@" in value:
        value = value.rsplit("@", 1)[1]
    value = value.rstrip(".")
    return value or None


def parent_suffixes(domain: str) -> list[str]:
    """
    Parent domains from most to least specific.

    >>> parent_suffixes("mail.support.example.com")
    ['support.example.com', 'example.com', 'com']
    """
    labels = domain.split(".")
    return [".".join(labels[i:]) for i in range(1, len(labels))]


def parse_legacy_domains(raw: Optional[str]) -> list[str]:
    """Split the deprecated comma-separated field; no validation here."""
    if not raw:
        return []
    return [d.strip().lower() for d in raw.split(",") if d.strip()]
