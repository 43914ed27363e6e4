# troop_events/models/user.py
from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from troop_events.database import Base

class User(Base):
    """Local copy of the identity provider's user directory, used for joins."""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(50), unique=True, index=True, nullable=False)
    first_name = Column(String(100))
    last_name = Column(String(100))
    email = Column(String(100), unique=True, index=True, nullable=True)
    role = Column(String(20), nullable=False, default="public") # public, helper, leader, admin

    helper = relationship("Helper", back_populates="user", uselist=False)


class UserFieldsMixin:
    """Exposes the identity fields of the related user on rows that point at one."""

    def _person(self):
        return self.user

    @property
    def username(self):
        person = self._person()
        return person.username if person else None

    @property
    def first_name(self):
        person = self._person()
        return person.first_name if person else None

    @property
    def last_name(self):
        person = self._person()
        return person.last_name if person else None

    @property
    def email(self):
        person = self._person()
        return person.email if person else None
