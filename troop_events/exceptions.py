# -*- coding: utf-8 -*-
"""
Typed errors raised by the scheduling and attendance core.

Each error carries the HTTP status the API layer answers with, so routes never
have to translate them one by one.
"""


class EventCoreError(Exception):
    status_code = 500
    default_detail = "Event core error"

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


# --- 404 ---

class NotFound(EventCoreError):
    status_code = 404
    default_detail = "Not found"


class EventNotFound(NotFound):
    default_detail = "Event not found"


class HelperNotFound(NotFound):
    default_detail = "Helper not found"


class UserNotFound(NotFound):
    default_detail = "User not found"


class ReminderNotFound(NotFound):
    default_detail = "Reminder not found"


class RegistrationNotFound(NotFound):
    default_detail = "User is not registered for this event"


# --- 400 ---

class Conflict(EventCoreError):
    status_code = 400
    default_detail = "Conflict"


class AlreadyRegistered(Conflict):
    default_detail = "User is already registered for this event"


class CapacityExceeded(Conflict):
    default_detail = "Event has reached maximum number of participants"


class HelperUnavailable(Conflict):
    default_detail = "Helper is already assigned to an overlapping event"


class InvalidState(EventCoreError):
    status_code = 400
    default_detail = "Invalid state"


class EventAlreadyStarted(InvalidState):
    default_detail = "Cannot register for past events"


class NotAssigned(InvalidState):
    default_detail = "Helper is not assigned to this event"


class RegistrationCancelled(InvalidState):
    default_detail = "Registration was cancelled; attendance cannot be recorded"


class InvalidTimeWindow(InvalidState):
    default_detail = "End time must be later than start time"


# --- 500 ---

class PersistenceFailure(EventCoreError):
    status_code = 500
    default_detail = "Transaction aborted"
