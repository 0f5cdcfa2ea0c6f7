"""Closed value sets for every entity with a lifecycle.

Transitions between members are not restricted: any status may follow any
other, including moving a completed item back to its first state.
"""
from enum import Enum


class StepStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class EngagementStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ON_HOLD = "on_hold"


class RiskStatus(str, Enum):
    OPEN = "open"
    IN_PROGRESS = "in_progress"
    MITIGATED = "mitigated"
    CLOSED = "closed"


class RiskSeverity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class RiskLikelihood(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class SignatureStatus(str, Enum):
    DRAFT = "draft"
    SENT = "sent"
    VIEWED = "viewed"
    SIGNED = "signed"
    DECLINED = "declined"
    VOIDED = "voided"


class DocumentType(str, Enum):
    SOW = "sow"
    KICKOFF_MATERIAL = "kickoff_material"


# Signing is closed once a request reaches one of these.
FINAL_SIGNATURE_STATUSES = {SignatureStatus.SIGNED, SignatureStatus.DECLINED, SignatureStatus.VOIDED}
