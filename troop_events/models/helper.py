# troop_events/models/helper.py
from sqlalchemy import Column, Integer, String, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from troop_events.database import Base
from troop_events.models.user import UserFieldsMixin

class Helper(UserFieldsMixin, Base):
    __tablename__ = "helpers"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, unique=True)
    skills = Column(String(255), nullable=True)
    notes = Column(String(255), nullable=True)

    user = relationship("User", back_populates="helper")
    assignments = relationship("HelperAssignment", back_populates="helper")


class HelperAssignment(UserFieldsMixin, Base):
    __tablename__ = "event_helpers"
    __table_args__ = (
        UniqueConstraint("event_id", "helper_id", name="uq_event_helper"),
    )

    id = Column(Integer, primary_key=True, index=True)
    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True)
    helper_id = Column(Integer, ForeignKey("helpers.id"), nullable=False, index=True)
    confirmed = Column(Boolean, nullable=False, default=False)

    event = relationship("Event", back_populates="helper_assignments")
    helper = relationship("Helper", back_populates="assignments")

    def _person(self):
        return self.helper.user if self.helper else None

    @property
    def user_id(self):
        return self.helper.user_id if self.helper else None
