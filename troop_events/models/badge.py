# troop_events/models/badge.py
from sqlalchemy import Column, Integer, String, ForeignKey
from troop_events.database import Base

class Badge(Base):
    __tablename__ = "badges"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    category = Column(String(50))
    description = Column(String(255))


class EventBadge(Base):
    __tablename__ = "event_badges"

    event_id = Column(Integer, ForeignKey("events.id", ondelete="CASCADE"), primary_key=True)
    badge_id = Column(Integer, ForeignKey("badges.id"), primary_key=True)
