from pydantic import AliasChoices, BaseModel, ConfigDict, Field

from jeevraksha.models.common import FormBool, JsonList, JsonObject, Latitude, Longitude
from jeevraksha.services.triage import TriageFlags, TriageResult


class TriageAssessRequest(BaseModel):
    """Symptom checklist as posted by the triage form.

    The form's short field names (``stand``, ``vehicle``, ``young``) are
    accepted alongside the descriptive ones. Answers may be booleans or
    "yes"/"no"; anything missing is treated as "no".
    """

    model_config = ConfigDict(populate_by_name=True)

    animal_type: str | None = None
    bleeding: FormBool = False
    cannot_stand: FormBool = Field(False, validation_alias=AliasChoices("cannot_stand", "stand"))
    vehicle_involved: FormBool = Field(False, validation_alias=AliasChoices("vehicle_involved", "vehicle"))
    breathing_difficulty: FormBool = Field(
        False, validation_alias=AliasChoices("breathing_difficulty", "breathing")
    )
    juvenile: FormBool = Field(False, validation_alias=AliasChoices("juvenile", "young"))
    description: str | None = None
    image_url: str | None = None
    # Optional caller position, used to rank recommended contacts
    latitude: Latitude | None = None
    longitude: Longitude | None = None

    def flags(self) -> TriageFlags:
        return TriageFlags(
            bleeding=self.bleeding,
            cannot_stand=self.cannot_stand,
            vehicle_involved=self.vehicle_involved,
            breathing_difficulty=self.breathing_difficulty,
            juvenile=self.juvenile,
        )


class RecommendedContact(BaseModel):
    id: str
    name: str
    phone: str | None = None
    city: str | None = None
    distance_km: float | None = None


class TriageAssessment(TriageResult):
    id: str | None = None
    recommended_contacts: list[RecommendedContact] = Field(default_factory=list)
    emoji: str
    color: str


class TriageRecord(BaseModel):
    id: str
    animal_type: str | None = None
    symptoms: JsonObject = None
    description: str | None = None
    image_url: str | None = None
    strategy: str
    urgency_level: str
    risk_score: int
    advice: str | None = None
    first_aid: JsonList = Field(default_factory=list)
    user_id: str | None = None
    created_at: str


class TriageStats(BaseModel):
    total_assessments: int
    critical_cases: int
    urgent_cases: int
