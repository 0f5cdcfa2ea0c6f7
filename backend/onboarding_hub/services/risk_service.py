from typing import NamedTuple

SEVERITY_SCORES = {"low": 1, "medium": 2, "high": 3, "critical": 4}
LIKELIHOOD_SCORES = {"low": 1, "medium": 2, "high": 3}


class RiskPriority(NamedTuple):
    score: int
    level: str


def compute_priority(severity: str, likelihood: str) -> RiskPriority:
    """Score a risk as severity x likelihood and bucket the product.

    >>> compute_priority("critical", "high")
    RiskPriority(score=12, level='Critical')
    """
    severity = getattr(severity, "value", severity)
    likelihood = getattr(likelihood, "value", likelihood)
    score = SEVERITY_SCORES[severity] * LIKELIHOOD_SCORES[likelihood]
    if score >= 9:
        level = "Critical"
    elif score >= 6:
        level = "High"
    elif score >= 3:
        level = "Medium"
    else:
        level = "Low"
    return RiskPriority(score, level)
