# troop_events/routes/events_fastapi.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Request, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from troop_events.auth import Identity, get_current_identity, get_leader_or_admin, get_optional_identity
from troop_events.database import get_db
from troop_events.schemas.event import EventCreate, EventFilters, EventRead, EventSummary, EventUpdate
from troop_events.services.event_store import EventStore, can_view

router = APIRouter(
    tags=["Events"],
    responses={404: {"description": "Event not found"}},
)


def event_filters(request: Request, identity: Identity = Depends(get_optional_identity)) -> EventFilters:
    """Builds the listing filters from the query string; the role always comes from the caller."""
    params = dict(request.query_params)
    params["user_role"] = identity.role
    try:
        return EventFilters(**params)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=[": ".join(filter(None, (".".join(str(p) for p in err["loc"]), err["msg"]))) for err in e.errors()],
        )


def _get_or_404(store, event_id):
    db_event = store.get_by_id(event_id)
    if db_event is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return db_event


def _check_can_modify(db_event, identity):
    if db_event.created_by != identity.user_id and not identity.is_staff:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You don't have permission to modify this event")


@router.get("", response_model=List[EventSummary])
def list_events(filters: EventFilters = Depends(event_filters), db: Session = Depends(get_db)):
    return EventStore(db).get_all(filters)


@router.get("/event-types", response_model=List[str])
def list_event_types(db: Session = Depends(get_db)):
    return EventStore(db).get_event_types()


@router.get("/{event_id}", response_model=EventRead)
def read_event(event_id: int, identity: Identity = Depends(get_optional_identity), db: Session = Depends(get_db)):
    db_event = _get_or_404(EventStore(db), event_id)
    if not can_view(db_event, identity.role):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="You don't have permission to view this event")
    return db_event


@router.post("", response_model=EventRead, status_code=status.HTTP_201_CREATED)
def create_event(event: EventCreate, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return EventStore(db).create(
        event.dict(exclude={"badge_ids"}),
        badge_ids=event.badge_ids,
        created_by=identity.user_id,
    )


@router.put("/{event_id}", response_model=EventRead)
def update_event(event_id: int, event: EventUpdate, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    store = EventStore(db)
    _check_can_modify(_get_or_404(store, event_id), identity)

    update_data = event.dict(exclude_unset=True)
    badge_ids = update_data.pop("badge_ids", None)
    return store.update(event_id, update_data, badge_ids=badge_ids)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: int, identity: Identity = Depends(get_current_identity), db: Session = Depends(get_db)):
    store = EventStore(db)
    _check_can_modify(_get_or_404(store, event_id), identity)

    if not store.delete(event_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Event not found")
    return None
