"""
MCA lender identification.

Resolves canonical lender names from free-text descriptions and from the
"... - LENDERNAME" suffix carried by tagged categories.
"""

import re
from typing import Optional

from ..patterns.transaction_patterns import (
    MCA_LENDER_PATTERNS,
    KNOWN_MCA_COMPANIES,
    KNOWN_MCA_COMPANIES_SORTED,
    TAG_LENDER_SUFFIX_PATTERN,
    FALLBACK_LENDER_PATTERN,
)


def match_lender(text: Optional[str]) -> Optional[str]:
    """
    Find the first registry lender mentioned in the text.

    Returns:
        Canonical lender name, or None when no registry pattern matches
    """
    if not text:
        return None
    for pattern, canonical in MCA_LENDER_PATTERNS:
        if re.search(pattern, text):
            return canonical
    return None


def normalize_lender_name(name: Optional[str]) -> Optional[str]:
    """
    Normalize a raw lender name to its canonical form.

    Known companies and registry patterns map to their canonical names;
    anything else is whitespace-collapsed and uppercased with underscores.
    """
    if not name:
        return None
    upper_name = " ".join(name.split()).upper()
    if not upper_name:
        return None
    if upper_name in KNOWN_MCA_COMPANIES:
        return KNOWN_MCA_COMPANIES[upper_name]
    registry_match = match_lender(upper_name)
    if registry_match:
        return registry_match
    return upper_name.replace(" ", "_")


def extract_lender_from_tag(tag: Optional[str]) -> Optional[str]:
    """
    Extract the lender from a tagged category such as
    "Income - MCA Disbursal - EBF" or "Expense - MCA - Fundbox".
    """
    if not tag:
        return None

    suffix = re.search(TAG_LENDER_SUFFIX_PATTERN, tag.strip())
    if suffix:
        return normalize_lender_name(suffix.group(1).strip())

    upper_tag = tag.upper()
    for company, canonical in KNOWN_MCA_COMPANIES_SORTED:
        if company in upper_tag:
            return canonical
    return None


def extract_fallback_lender(description: Optional[str]) -> Optional[str]:
    """Last-resort lender name for MCA debits, e.g. "MCA-ACME 0412" -> "ACME"."""
    if not description:
        return None
    match = re.search(FALLBACK_LENDER_PATTERN, description)
    if match:
        return match.group(1).upper()
    return None
