# troop_events/models/registration.py
from datetime import datetime
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, text
from sqlalchemy.orm import relationship
from troop_events.database import Base
from troop_events.models.user import UserFieldsMixin

REGISTERED = "registered"
CANCELLED = "cancelled"
ATTENDED = "attended"

class Registration(UserFieldsMixin, Base):
    __tablename__ = "event_participants"
    __table_args__ = (
        # At most one non-cancelled registration per user and event
        Index(
            "uq_active_registration", "event_id", "user_id",
            unique=True,
            sqlite_where=text("status != 'cancelled'"),
            postgresql_where=text("status != 'cancelled'"),
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    registration_date = Column(DateTime, default=datetime.utcnow)
    status = Column(String(20), nullable=False, default=REGISTERED) # registered, cancelled, attended
    notes = Column(String(255), nullable=True, default="")

    event = relationship("Event", back_populates="registrations")
    user = relationship("User")
