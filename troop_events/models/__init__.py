# Import every model so SQLAlchemy registers all tables
from troop_events.models.user import User
from troop_events.models.badge import Badge, EventBadge
from troop_events.models.event import Event
from troop_events.models.helper import Helper, HelperAssignment
from troop_events.models.registration import Registration
from troop_events.models.attendance import AttendanceRecord
from troop_events.models.reminder import Reminder
