from pydantic import BaseModel, ConfigDict, Field, AliasChoices
from typing import Optional, List, Union
from decimal import Decimal


class EventCreateRequest(BaseModel):
    """
    Body of POST /api/events/create.

    Keys follow the event form (eventName, eventDate, ...). ``OrgCid`` is
    accepted as a legacy spelling of ``clubId``.
    """
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, validation_alias=AliasChoices("eventName", "name"))
    description: Optional[str] = Field(None, validation_alias=AliasChoices("eventDescription", "description"))
    event_date: Optional[str] = Field(None, validation_alias=AliasChoices("eventDate", "event_date"))
    event_time: Optional[str] = Field(None, validation_alias=AliasChoices("eventTime", "event_time"))
    location: Optional[str] = Field(None, validation_alias=AliasChoices("eventLocation", "location"))
    max_participants: Optional[Union[int, str]] = Field(
        None, validation_alias=AliasChoices("maxParticipants", "max_participants")
    )
    max_volunteers: Optional[Union[int, str]] = Field(
        None, validation_alias=AliasChoices("maxVolunteers", "max_volunteers")
    )
    registration_fee: Optional[Union[Decimal, str]] = Field(
        None, validation_alias=AliasChoices("registrationFee", "registration_fee")
    )
    club_id: Optional[Union[int, str]] = Field(None, validation_alias=AliasChoices("clubId", "OrgCid", "club_id"))


class EventCreateResponse(BaseModel):
    success: bool = True
    message: str
    eventId: int
    organizerUSN: str


class CountResponse(BaseModel):
    count: int


class EventView(BaseModel):
    """Event as returned by listing and detail endpoints"""
    eid: int
    ename: str
    eventdesc: str
    eventDate: str
    eventTime: str
    eventLoc: str
    maxPart: Optional[int] = None
    maxVoln: Optional[int] = None
    regFee: float
    clubId: Optional[int] = None
    clubName: Optional[str] = None
    organizerName: Optional[str] = None
    OrgUsn: str
    status: str
    displayDate: str
    displayTime: str
    feeLabel: str


class EventDetail(EventView):
    isRegistered: bool = False
    isVolunteer: bool = False
    isOrganizer: bool = False


class EventListResponse(BaseModel):
    """Events split by lifecycle status"""
    ongoing: List[EventView] = []
    completed: List[EventView] = []
    upcoming: List[EventView] = []
    currentUser: str


class ParticipantEventView(EventView):
    PartStatus: bool
    PartUSN: str
    role: str = "participant"


class VolunteerEventView(EventView):
    VolnStatus: bool
    role: str = "volunteer"


class OrganizedEventView(EventView):
    role: str = "organizer"


class ParticipantEventsResponse(BaseModel):
    participantEvents: List[ParticipantEventView]
    userUSN: str


class VolunteerEventsResponse(BaseModel):
    volunteerEvents: List[VolunteerEventView]
    userUSN: str


class OrganizedEventsResponse(BaseModel):
    organizerEvents: List[OrganizedEventView]
    userUSN: str
