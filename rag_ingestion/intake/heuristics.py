"""Byte and text signatures used by the content filters."""

import re

# EICAR anti-virus test file signature
EICAR_SIGNATURE = rb"X5O!P%@AP[4\PZX54(P^)7CC)7}$EICAR-STANDARD-ANTIVIRUS-TEST-FILE!$H+H*"

SCRIPT_MARKERS: dict[str, re.Pattern[str]] = {
    "script-tag": re.compile(r"<\s*script\b", re.IGNORECASE),
    "javascript-uri": re.compile(r"javascript\s*:", re.IGNORECASE),
    "vbscript-uri": re.compile(r"vbscript\s*:", re.IGNORECASE),
}

MALWARE_KEYWORDS = (
    "malware",
    "virus",
    "trojan",
    "ransomware",
    "keylogger",
    "rootkit",
    "backdoor",
    "botnet",
)

POLICY_KEYWORDS = (
    "top secret",
    "classified information",
    "social security number",
    "credit card number",
    "do not distribute",
)


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    words = (re.escape(word) for word in keyword.split())
    return re.compile(r"\b" + r"\s+".join(words) + r"\b", re.IGNORECASE)


_MALWARE_PATTERNS = tuple((kw, _keyword_pattern(kw)) for kw in MALWARE_KEYWORDS)
_POLICY_PATTERNS = tuple((kw, _keyword_pattern(kw)) for kw in POLICY_KEYWORDS)


def contains_malware_signature(body: bytes) -> bool:
    return EICAR_SIGNATURE in body


def find_script_markers(text: str) -> tuple[str, ...]:
    """Names of the active-script markers present, in declaration order."""
    return tuple(name for name, pattern in SCRIPT_MARKERS.items() if pattern.search(text))


def find_malware_keywords(text: str) -> tuple[str, ...]:
    return tuple(kw for kw, pattern in _MALWARE_PATTERNS if pattern.search(text))


def find_policy_keywords(text: str) -> tuple[str, ...]:
    return tuple(kw for kw, pattern in _POLICY_PATTERNS if pattern.search(text))
