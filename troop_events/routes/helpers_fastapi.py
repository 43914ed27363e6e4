# troop_events/routes/helpers_fastapi.py
from datetime import date, time
from typing import List
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from troop_events.auth import Identity, get_current_identity, get_leader_or_admin
from troop_events.database import get_db
from troop_events.models.helper import Helper
from troop_events.schemas.event import HelperEventRead
from troop_events.schemas.helper import AvailableHelperRead, EventHelperRead, HelperAssign, HelperConfirmation
from troop_events.services.availability import AvailabilityResolver

router = APIRouter(
    tags=["Helpers"],
)


@router.get("/helpers/{helper_id}/events", response_model=List[HelperEventRead])
def read_helper_events(
    helper_id: int,
    include_confirmed: bool = True,
    include_pending: bool = True,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db),
):
    own_profile = db.query(Helper.id).filter(Helper.user_id == identity.user_id).first()
    is_own = own_profile is not None and own_profile.id == helper_id
    if not is_own and not identity.is_staff:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You don't have permission to view these events")
    return AvailabilityResolver(db).get_helper_events(helper_id, include_confirmed, include_pending)


@router.get("/{event_id}/available-helpers", response_model=List[AvailableHelperRead])
def read_available_helpers(
    event_id: int,
    event_date: date,
    start_time: time,
    end_time: time,
    identity: Identity = Depends(get_leader_or_admin),
    db: Session = Depends(get_db),
):
    return AvailabilityResolver(db).find_available_helpers(event_id, event_date, start_time, end_time)


@router.post("/{event_id}/helpers", response_model=EventHelperRead)
def assign_helper(event_id: int, assignment: HelperAssign, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return AvailabilityResolver(db).assign_helper(
        event_id,
        assignment.helper_id,
        confirmed=assignment.confirmed,
        check_availability=assignment.check_availability,
    )


@router.put("/{event_id}/helpers/{helper_id}")
def update_helper_confirmation(
    event_id: int,
    helper_id: int,
    confirmation: HelperConfirmation,
    identity: Identity = Depends(get_leader_or_admin),
    db: Session = Depends(get_db),
):
    AvailabilityResolver(db).update_confirmation(event_id, helper_id, confirmation.confirmed)
    return {"message": f"Helper {'confirmed' if confirmation.confirmed else 'unconfirmed'} successfully"}


@router.delete("/{event_id}/helpers/{helper_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_helper(event_id: int, helper_id: int, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    AvailabilityResolver(db).remove_helper(event_id, helper_id)
    return None


@router.post("/{event_id}/volunteer", response_model=EventHelperRead)
def volunteer_for_event(event_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    if identity.role != "helper":
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Only helpers can volunteer for events")
    return AvailabilityResolver(db).volunteer(event_id, identity.user_id)
