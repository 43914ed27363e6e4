# troop_events/models/reminder.py
from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, CheckConstraint
from sqlalchemy.orm import relationship
from troop_events.database import Base

class Reminder(Base):
    __tablename__ = "event_reminders"
    __table_args__ = (
        CheckConstraint(
            "(sent AND sent_time IS NOT NULL) OR (NOT sent AND sent_time IS NULL)",
            name="ck_reminder_sent_time",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    reminder_type = Column(String(50), nullable=False)
    reminder_time = Column(DateTime, nullable=False, index=True)
    sent = Column(Boolean, nullable=False, default=False)
    sent_time = Column(DateTime, nullable=True)

    event = relationship("Event", back_populates="reminders")

    @property
    def event_title(self):
        return self.event.title

    @property
    def event_date(self):
        return self.event.start_date

    @property
    def event_time(self):
        return self.event.start_time
