# Re-export all models for convenient imports
from eventhub.models.student import Student
from eventhub.models.club import Club, Membership
from eventhub.models.event import Event
from eventhub.models.participation import Participant, Volunteer
from eventhub.models.payment import EventPayment, PaymentStatus
from eventhub.models.session import UserSession

__all__ = [
    "Student",
    "Club",
    "Membership",
    "Event",
    "Participant",
    "Volunteer",
    "EventPayment",
    "PaymentStatus",
    "UserSession",
]
