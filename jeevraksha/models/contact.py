from pydantic import BaseModel


class ContactCreate(BaseModel):
    name: str = ""
    email: str = ""
    message: str = ""


class ContactMessage(BaseModel):
    id: str
    name: str
    email: str
    message: str
    created_at: str
