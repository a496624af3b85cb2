from pydantic import BaseModel


class PlatformStats(BaseModel):
    total_reports: int = 0
    rescued_animals: int = 0
    active_ngos: int = 0
    active_volunteers: int = 0
    pending_reports: int = 0
    in_progress_reports: int = 0
    animals_adopted: int = 0
    total_donations: float = 0


class RecentReport(BaseModel):
    id: str
    animal_type: str
    condition: str
    location: str
    status: str
    urgency_level: str
    created_at: str


class MonthlyTrend(BaseModel):
    reports: int = 0
    rescued: int = 0


class TopNGO(BaseModel):
    id: str
    name: str
    city: str | None = None
    rescue_count: int = 0


class AdminStats(BaseModel):
    users: dict[str, int]
    reports: dict[str, int]
    ngos: dict[str, int]
    volunteers: dict[str, int]
    donations: dict[str, float]
