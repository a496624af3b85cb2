from enum import Enum

from pydantic import BaseModel, Field

from jeevraksha.models.common import FormBool, JsonList


class ApplicationStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class AdoptionAnimalCreate(BaseModel):
    name: str = Field(..., min_length=1)
    animal_type: str = Field(..., min_length=1)
    breed: str | None = None
    age: int | None = Field(None, ge=0)
    age_unit: str = "years"
    gender: str | None = None
    size: str | None = None
    color: str | None = None
    description: str | None = None
    health_status: str | None = None
    is_vaccinated: FormBool = False
    is_neutered: FormBool = False
    temperament: str | None = None
    good_with_kids: FormBool = False
    good_with_pets: FormBool = False
    special_needs: str | None = None
    # Image URLs from the storage bucket; uploads happen client-side
    images: list[str] = Field(default_factory=list, max_length=5)
    ngo_id: str | None = None


class AdoptionAnimal(BaseModel):
    id: str
    name: str
    animal_type: str
    breed: str | None = None
    age: int | None = None
    age_unit: str | None = "years"
    gender: str | None = None
    size: str | None = None
    color: str | None = None
    description: str | None = None
    health_status: str | None = None
    is_vaccinated: bool = False
    is_neutered: bool = False
    temperament: str | None = None
    good_with_kids: bool = False
    good_with_pets: bool = False
    special_needs: str | None = None
    images: JsonList = Field(default_factory=list)
    ngo_id: str | None = None
    status: str
    adopted_at: str | None = None
    created_at: str


class NGORef(BaseModel):
    id: str
    name: str
    city: str | None = None
    phone: str | None = None


class AdoptionAnimalDetail(AdoptionAnimal):
    ngo: NGORef | None = None


class ApplicationCreate(BaseModel):
    animal_id: str | None = None
    animal_name: str | None = None
    animal_type: str | None = None
    animal_breed: str | None = None
    applicant_name: str = Field(..., min_length=1)
    applicant_email: str = Field(..., min_length=3)
    applicant_phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    occupation: str | None = None
    has_pets: FormBool = False
    current_pets: str | None = None
    has_kids: FormBool = False
    kids_ages: str | None = None
    home_type: str | None = None
    has_yard: FormBool = False
    experience: str | None = None
    reason: str | None = None
    references: str | None = None


class ApplicationStatusUpdate(BaseModel):
    status: ApplicationStatus
    notes: str | None = None


class AdoptionApplication(BaseModel):
    id: str
    animal_id: str | None = None
    animal_name: str | None = None
    animal_type: str | None = None
    animal_breed: str | None = None
    applicant_name: str
    applicant_email: str
    applicant_phone: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    pincode: str | None = None
    occupation: str | None = None
    has_pets: bool = False
    current_pets: str | None = None
    has_kids: bool = False
    kids_ages: str | None = None
    home_type: str | None = None
    has_yard: bool = False
    experience: str | None = None
    reason: str | None = None
    references: str | None = None
    ngo_id: str | None = None
    status: str
    review_notes: str | None = None
    reviewed_at: str | None = None
    reviewed_by: str | None = None
    user_id: str | None = None
    created_at: str
    updated_at: str | None = None


class ApplicationWithAnimal(AdoptionApplication):
    animal: AdoptionAnimal | None = None
