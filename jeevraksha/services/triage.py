"""Urgency scoring for injured-animal triage.

Two rubrics exist side by side:

- ``BackendTriageStrategy``: point weights 35/30/25/20/10 with score
  thresholds 60/40/20. Used for persisted assessments.
- ``QuickFormTriageStrategy``: point weights 4/3/3/2/1 plus compound symptom
  rules (e.g. vehicle AND bleeding is always critical). Used by the quick
  self-check form.

They disagree for some inputs, so callers pick one by name.
"""

from __future__ import annotations

import logging
from enum import Enum

from pydantic import BaseModel

logger = logging.getLogger(__name__)


class UrgencyTier(str, Enum):
    CRITICAL = "critical"
    URGENT = "urgent"
    MONITOR = "monitor"
    NON_EMERGENCY = "non_emergency"


class TriageFlags(BaseModel):
    """Symptom answers. Anything not reported counts as absent."""

    bleeding: bool = False
    cannot_stand: bool = False
    vehicle_involved: bool = False
    breathing_difficulty: bool = False
    juvenile: bool = False


class TriageResult(BaseModel):
    strategy: str
    animal_type: str | None = None
    risk_score: int
    urgency_tier: UrgencyTier
    advice: str
    first_aid: list[str]
    contact_priority: str


# Contact priority depends only on the tier, whichever rubric produced it
CONTACT_PRIORITY: dict[UrgencyTier, str] = {
    UrgencyTier.CRITICAL: "Call emergency vet/NGO immediately",
    UrgencyTier.URGENT: "Contact NGO/rescue within 30 minutes",
    UrgencyTier.MONITOR: "Contact local shelter within a few hours",
    UrgencyTier.NON_EMERGENCY: "Contact animal welfare when convenient",
}

URGENCY_EMOJI: dict[UrgencyTier, str] = {
    UrgencyTier.CRITICAL: "🔴",
    UrgencyTier.URGENT: "🟠",
    UrgencyTier.MONITOR: "🟡",
    UrgencyTier.NON_EMERGENCY: "🟢",
}

URGENCY_COLOR: dict[UrgencyTier, str] = {
    UrgencyTier.CRITICAL: "#dc2626",
    UrgencyTier.URGENT: "#ea580c",
    UrgencyTier.MONITOR: "#ca8a04",
    UrgencyTier.NON_EMERGENCY: "#16a34a",
}

_UNKNOWN_EMOJI = "⚪"
_UNKNOWN_COLOR = "#6b7280"


def urgency_emoji(tier: UrgencyTier | str) -> str:
    try:
        return URGENCY_EMOJI[UrgencyTier(tier)]
    except ValueError:
        return _UNKNOWN_EMOJI


def urgency_color(tier: UrgencyTier | str) -> str:
    try:
        return URGENCY_COLOR[UrgencyTier(tier)]
    except ValueError:
        return _UNKNOWN_COLOR


class TriageStrategy:
    """Base rubric: a weighted sum plus a score-to-tier mapping."""

    name: str = ""
    weights: dict[str, int] = {}
    advice: dict[UrgencyTier, str] = {}
    first_aid: dict[UrgencyTier, list[str]] = {}

    def score(self, flags: TriageFlags) -> int:
        return sum(weight for field, weight in self.weights.items() if getattr(flags, field))

    def tier(self, score: int, flags: TriageFlags) -> UrgencyTier:  # pragma: no cover - interface
        raise NotImplementedError

    @property
    def max_score(self) -> int:
        return sum(self.weights.values())

    def evaluate(self, flags: TriageFlags, animal_type: str | None = None) -> TriageResult:
        score = self.score(flags)
        tier = self.tier(score, flags)
        return TriageResult(
            strategy=self.name,
            animal_type=animal_type,
            risk_score=score,
            urgency_tier=tier,
            advice=self.advice[tier],
            first_aid=list(self.first_aid[tier]),
            contact_priority=CONTACT_PRIORITY[tier],
        )


class BackendTriageStrategy(TriageStrategy):
    name = "backend"
    weights = {
        "vehicle_involved": 35,
        "bleeding": 30,
        "breathing_difficulty": 25,
        "cannot_stand": 20,
        "juvenile": 10,
    }
    # Descending; first threshold the score reaches wins
    thresholds = [
        (60, UrgencyTier.CRITICAL),
        (40, UrgencyTier.URGENT),
        (20, UrgencyTier.MONITOR),
    ]
    advice = {
        UrgencyTier.CRITICAL: "This is a CRITICAL emergency! The animal needs immediate professional help.",
        UrgencyTier.URGENT: "Urgent attention needed. Contact rescue team as soon as possible.",
        UrgencyTier.MONITOR: "Monitor the animal closely. Seek help if condition worsens.",
        UrgencyTier.NON_EMERGENCY: "No immediate emergency detected. Monitor and provide basic care.",
    }
    first_aid = {
        UrgencyTier.CRITICAL: [
            "Keep the animal calm and still",
            "Do not move the animal unless absolutely necessary",
            "Apply gentle pressure to bleeding wounds with clean cloth",
            "Keep the animal warm with a blanket",
            "Do NOT give food or water if unconscious",
        ],
        UrgencyTier.URGENT: [
            "Move animal to safe area if on road",
            "Provide shade and shelter",
            "Offer water in a shallow container if conscious",
            "Monitor breathing and behavior",
            "Keep other animals and people away",
        ],
        UrgencyTier.MONITOR: [
            "Provide fresh water",
            "Create a quiet, safe space",
            "Offer food if the animal seems hungry",
            "Watch for signs of distress",
            "Take photos for documentation",
        ],
        UrgencyTier.NON_EMERGENCY: [
            "Provide food and water",
            "Create shelter from weather",
            "Monitor for any changes",
            "Consider long-term care options",
        ],
    }

    def tier(self, score: int, flags: TriageFlags) -> UrgencyTier:
        for threshold, tier in self.thresholds:
            if score >= threshold:
                return tier
        return UrgencyTier.NON_EMERGENCY


class QuickFormTriageStrategy(TriageStrategy):
    name = "quick_form"
    weights = {
        "vehicle_involved": 4,
        "bleeding": 3,
        "breathing_difficulty": 3,
        "cannot_stand": 2,
        "juvenile": 1,
    }
    advice = {
        UrgencyTier.CRITICAL: "CRITICAL EMERGENCY. Call the nearest rescue/NGO immediately.",
        UrgencyTier.URGENT: "URGENT. Arrange transport to a vet within 1-2 hours.",
        UrgencyTier.MONITOR: "NEEDS ATTENTION. Observe closely and escalate if it worsens.",
        UrgencyTier.NON_EMERGENCY: "NON-EMERGENCY. The animal appears stable.",
    }
    first_aid = {
        UrgencyTier.CRITICAL: [
            "DO NOT move the animal unless in immediate danger",
            "Keep the animal calm - speak softly",
            "If bleeding: Apply gentle pressure with clean cloth",
            "Keep the animal warm with a blanket",
            "DO NOT give food or water",
        ],
        UrgencyTier.URGENT: [
            "Check for visible injuries",
            "Create a safe barrier around the animal",
            "Apply gentle pressure to stop bleeding",
            "Keep in a quiet, shaded place",
            "Arrange transport to vet within 1-2 hours",
        ],
        UrgencyTier.MONITOR: [
            "Keep the animal in a well-ventilated area",
            "Provide fresh water nearby",
            "Observe behavior for 30 minutes",
            "If condition worsens, escalate to urgent",
            "Consult a vet if not improving",
        ],
        UrgencyTier.NON_EMERGENCY: [
            "The animal appears to be in stable condition",
            "Provide fresh water and some shade",
            "Keep an eye on the animal for changes",
            "Consider reporting for regular care",
            "Contact local NGO for sterilization programs",
        ],
    }

    def tier(self, score: int, flags: TriageFlags) -> UrgencyTier:
        vehicle = flags.vehicle_involved
        bleeding = flags.bleeding
        breathing = flags.breathing_difficulty
        if score >= 6 or (vehicle and bleeding) or (bleeding and breathing):
            return UrgencyTier.CRITICAL
        if score >= 4 or vehicle or (bleeding and not breathing):
            return UrgencyTier.URGENT
        if score >= 2 or breathing or flags.cannot_stand:
            return UrgencyTier.MONITOR
        return UrgencyTier.NON_EMERGENCY


STRATEGIES: dict[str, TriageStrategy] = {
    BackendTriageStrategy.name: BackendTriageStrategy(),
    QuickFormTriageStrategy.name: QuickFormTriageStrategy(),
}


def score_triage(
    flags: TriageFlags,
    animal_type: str | None = None,
    strategy: str = BackendTriageStrategy.name,
) -> TriageResult:
    """Score symptom flags with the named rubric.

    Raises KeyError for an unknown strategy name.
    """
    result = STRATEGIES[strategy].evaluate(flags, animal_type)
    logger.debug(
        "Triage (%s) for %s: score=%d tier=%s",
        strategy, animal_type or "animal", result.risk_score, result.urgency_tier.value,
    )
    return result
