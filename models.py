import datetime
import uuid
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    return datetime.datetime.now(datetime.timezone.utc).isoformat()


class Classification(str, Enum):
    NONE = "None"
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class InboundMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=lambda: f"msg-{uuid.uuid4().hex[:12]}")
    rawText: Any = None  # non-strings are turned into a negative result by the detector
    timestamp: str = Field(default_factory=_now_iso)


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    timestamp: str
    sender: str = "Unknown"
    content: str = ""
    score: float = 0.0
    matchedKeywords: Tuple[str, ...] = ()
    matchedCategories: Tuple[str, ...] = ()
    classification: Classification = Classification.NONE
    shouldForward: bool = False
    filterReason: Optional[str] = None


class SmsWebhookPayload(BaseModel):
    content: str
    id: Optional[str] = None
    timestamp: Optional[str] = None


class WebhookResponse(BaseModel):
    success: bool = True
    processed: bool = True
    leadDetected: bool = False
    id: Optional[str] = None
    leadId: Optional[str] = None
    score: float = 0.0
    classification: Classification = Classification.NONE
    keywords: List[str] = []
    reason: Optional[str] = None


class LeadRecord(BaseModel):
    id: str
    receivedAt: str = Field(default_factory=_now_iso)
    notified: bool = False
    evaluation: EvaluationResult
