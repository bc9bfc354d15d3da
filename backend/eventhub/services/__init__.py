from eventhub.services.auth_service import AuthService, auth_service
from eventhub.services.club_service import ClubService, club_service
from eventhub.services.event_service import EventService, EventStatus, event_service
from eventhub.services.participation_service import (
    ParticipationService,
    AttendanceMarker,
    participation_service,
    attendance_marker,
)
from eventhub.services.email_service import EmailService, email_service
