# troop_events/routes/registrations_fastapi.py
from typing import Optional
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from troop_events.auth import Identity, get_current_identity
from troop_events.database import get_db
from troop_events.schemas.registration import RegistrationCreate, RegistrationRead, RegistrationStatus
from troop_events.services.registrations import RegistrationService

router = APIRouter(
    tags=["Registrations"],
)


@router.post("/{event_id}/register", response_model=RegistrationRead, status_code=status.HTTP_201_CREATED)
def register_for_event(
    event_id: int,
    registration: Optional[RegistrationCreate] = None,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    notes = registration.notes if registration else ""
    return RegistrationService(db).register(event_id, identity.user_id, notes=notes)


@router.delete("/{event_id}/register", response_model=RegistrationRead)
def cancel_registration(event_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return RegistrationService(db).cancel(event_id, identity.user_id)


@router.get("/{event_id}/register", response_model=RegistrationStatus)
def check_registration_status(event_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    return {"is_registered": RegistrationService(db).is_registered(event_id, identity.user_id)}
