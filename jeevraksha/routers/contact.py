import logging

from fastapi import APIRouter, HTTPException

from jeevraksha.database import get_db, insert_row, utc_now
from jeevraksha.models.contact import ContactCreate, ContactMessage

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/contact", tags=["contact"])


@router.post("", status_code=201)
async def send_message(body: ContactCreate):
    if not body.name.strip() or not body.email.strip() or not body.message.strip():
        raise HTTPException(status_code=400, detail="Name, email, and message are required.")

    db = await get_db()
    contact = await insert_row(db, "contact_messages", {
        "name": body.name.strip(),
        "email": body.email.strip(),
        "message": body.message,
        "created_at": utc_now(),
    })
    logger.info("Contact message received: %s", contact["id"])
    return {"success": True, "message": "Message sent successfully!", "contact": ContactMessage.model_validate(contact)}
