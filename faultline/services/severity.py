from __future__ import annotations
from typing import Dict, Tuple, Type
from faultline.models.schemas import Severity, SeverityInfo, Tier

SEVERITY_TABLE: Dict[int, Tuple[Tier, str]] = {
    Severity.ERROR: (Tier.CRITICAL, "Fatal Error"),
    Severity.WARNING: (Tier.WARNING, "Warning"),
    Severity.PARSE: (Tier.ERROR, "Parse Error"),
    Severity.NOTICE: (Tier.NOTICE, "Notice"),
    Severity.CORE_ERROR: (Tier.CRITICAL, "Core Error"),
    Severity.CORE_WARNING: (Tier.WARNING, "Core Warning"),
    Severity.COMPILE_ERROR: (Tier.CRITICAL, "Compile Error"),
    Severity.COMPILE_WARNING: (Tier.WARNING, "Compile Warning"),
    Severity.USER_ERROR: (Tier.ERROR, "User Error"),
    Severity.USER_WARNING: (Tier.WARNING, "User Warning"),
    Severity.USER_NOTICE: (Tier.NOTICE, "User Notice"),
    Severity.STRICT: (Tier.NOTICE, "Strict Standards"),
    Severity.RECOVERABLE_ERROR: (Tier.ERROR, "Recoverable Error"),
    Severity.DEPRECATED: (Tier.NOTICE, "Deprecated"),
    Severity.USER_DEPRECATED: (Tier.NOTICE, "User Deprecated"),
}

TIER_PREFIXES: Dict[Tier, str] = {
    Tier.CRITICAL: "‼Fatal Error: ",
    Tier.ERROR: "‼Fatal Error: ",
    Tier.WARNING: "⚠️Warning: ",
    Tier.NOTICE: "⚠️Notice: ",
}

# Checked in order, so subclasses come before their bases
WARNING_SEVERITIES: Tuple[Tuple[Type[Warning], Severity], ...] = (
    (DeprecationWarning, Severity.DEPRECATED),
    (PendingDeprecationWarning, Severity.DEPRECATED),
    (FutureWarning, Severity.USER_DEPRECATED),
    (SyntaxWarning, Severity.COMPILE_WARNING),
    (ImportWarning, Severity.CORE_WARNING),
    (ResourceWarning, Severity.NOTICE),
    (UserWarning, Severity.USER_WARNING),
    (RuntimeWarning, Severity.WARNING),
)


def classify(code: int) -> SeverityInfo:
    try:
        tier, label = SEVERITY_TABLE[code]
    except KeyError:
        return SeverityInfo(tier=Tier.UNKNOWN, label=f"Unknown Error ({code})")
    return SeverityInfo(tier=tier, label=label)


def tier_prefix(tier: Tier) -> str:
    return TIER_PREFIXES.get(tier, "‼Unknown Error: ")


def severity_for_warning(category: Type[Warning]) -> Severity:
    """Map a ``warnings`` category onto the severity code it is reported under."""
    for base, severity in WARNING_SEVERITIES:
        if issubclass(category, base):
            return severity
    return Severity.WARNING
