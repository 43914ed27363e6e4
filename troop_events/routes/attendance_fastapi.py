# troop_events/routes/attendance_fastapi.py
from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from troop_events.auth import Identity, get_leader_or_admin
from troop_events.database import get_db
from troop_events.schemas.attendance import AttendanceRead, CheckIn, CheckOut
from troop_events.services.attendance import AttendanceTracker

router = APIRouter(
    tags=["Attendance"],
)


@router.post("/{event_id}/attendance", response_model=AttendanceRead)
def record_attendance(event_id: int, check_in: CheckIn, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return AttendanceTracker(db).record_attendance(event_id, check_in.user_id, check_in.check_in_time)


@router.put("/{event_id}/attendance")
def record_check_out(event_id: int, check_out: CheckOut, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    updated = AttendanceTracker(db).record_check_out(event_id, check_out.user_id, check_out.check_out_time)
    return {"message": "Check-out recorded successfully", "updated": updated}


@router.get("/{event_id}/attendance", response_model=List[AttendanceRead])
def read_attendance(event_id: int, identity: Identity = Depends(get_leader_or_admin), db: Session = Depends(get_db)):
    return AttendanceTracker(db).get_attendance(event_id)
