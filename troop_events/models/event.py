# troop_events/models/event.py
from datetime import datetime, time
from sqlalchemy import Column, Integer, String, Float, Boolean, Date, Time, DateTime, ForeignKey, Text
from sqlalchemy.orm import relationship
from troop_events.database import Base

class Event(Base):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(150), nullable=False)
    description = Column(Text, default="")

    location_name = Column(String(150), default="")
    location_address = Column(String(255), default="")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)

    start_date = Column(Date, nullable=False, index=True)
    end_date = Column(Date, nullable=True)
    start_time = Column(Time, nullable=True)
    end_time = Column(Time, nullable=True)

    event_type = Column(String(50), nullable=False, default="Meeting", index=True)
    required_helpers = Column(Integer, nullable=False, default=0)
    max_participants = Column(Integer, nullable=False, default=0) # 0 = unlimited
    created_by = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    notes = Column(Text, default="")
    equipment = Column(Text, default="")
    cost = Column(Float, nullable=True)

    public_visible = Column(Boolean, nullable=False, default=True)
    leaders_only_visible = Column(Boolean, nullable=False, default=False)
    helpers_only_visible = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=datetime.utcnow)

    creator = relationship("User")
    badges = relationship("Badge", secondary="event_badges", order_by="Badge.id", viewonly=True)
    helper_assignments = relationship("HelperAssignment", back_populates="event", passive_deletes=True)
    registrations = relationship("Registration", back_populates="event", passive_deletes=True)
    attendance = relationship("AttendanceRecord", back_populates="event", passive_deletes=True)
    reminders = relationship("Reminder", back_populates="event", passive_deletes=True)

    @property
    def starts_at(self):
        return datetime.combine(self.start_date, self.start_time or time.min)

    def has_started(self, now=None):
        return self.starts_at < (now or datetime.utcnow())

    # --- derived fields used by the read schemas ---
    @property
    def helpers(self):
        return self.helper_assignments

    @property
    def participants(self):
        return self.registrations

    @property
    def badge_count(self):
        return len(self.badges)

    @property
    def helper_count(self):
        return len(self.helper_assignments)

    @property
    def participant_count(self):
        return sum(1 for r in self.registrations if r.status != "cancelled")
