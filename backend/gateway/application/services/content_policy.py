"""Content policy — denylist screening of input and leak redaction of output.

The deny rules are grouped by category so new terms can be added to a
group without touching the matching logic:

    credentials   — keys, secrets, tokens, passwords, SSH
    internal      — endpoints, internal/private material
    architecture  — source code, core components and access to them
    telemetry     — operational thresholds, drift, telemetry
"""

import re
from collections.abc import Iterable

DENY_PATTERNS: dict[str, tuple[str, ...]] = {
    "credentials": (
        r"api[\s_-]?key",
        r"\bsecret\b",
        r"\btoken\b",
        r"\bpassword\b",
        r"\bssh\b",
    ),
    "internal": (
        r"\bendpoint\b",
        r"\binternal\b",
        r"\bprivate\b",
    ),
    "architecture": (
        r"source\s*code",
        r"echoledger\s*core",
        r"\bcore\b.*\baccess\b",
    ),
    "telemetry": (
        r"\bthreshold\b",
        r"\bdrift\b",
        r"\btelemetry\b",
    ),
}

# Order matters: API keys are redacted before the generic hex rule runs.
_REDACTIONS: tuple[tuple[re.Pattern[str], str], ...] = (
    (re.compile(r"sk-[A-Za-z0-9]{20,}"), "[REDACTED_KEY]"),
    (re.compile(r"[A-Fa-f0-9]{32,64}"), "[REDACTED_HEX]"),
)


class ContentPolicy:
    """Pattern-based deny decision over free text. Stateless after construction."""

    def __init__(self, patterns: Iterable[str] | None = None):
        if patterns is None:
            patterns = [p for group in DENY_PATTERNS.values() for p in group]
        self._patterns = tuple(re.compile(p, re.IGNORECASE) for p in patterns)

    @property
    def pattern_count(self) -> int:
        return len(self._patterns)

    def is_denied(self, text: str) -> bool:
        """Return True if any deny pattern matches ``text``."""
        return any(p.search(text) for p in self._patterns)

    @staticmethod
    def sanitize(text: str | None) -> str:
        """Replace API-key-shaped tokens and long hex strings with redaction markers.

        A best-effort guard against echoing credentials, not a security boundary.
        """
        result = str(text or "")
        for pattern, marker in _REDACTIONS:
            result = pattern.sub(marker, result)
        return result
