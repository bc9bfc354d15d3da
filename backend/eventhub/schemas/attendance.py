from pydantic import BaseModel
from typing import Optional, Union, Literal


class MarkAttendanceRequest(BaseModel):
    eventId: Optional[Union[int, str]] = None
    usn: Optional[str] = None


class ScanAttendanceRequest(BaseModel):
    """QR text as read by the scanner, e.g. "eventId:42" """
    qrText: Optional[str] = None
    role: Literal["participant", "volunteer"] = "participant"


class ScanAttendanceResponse(BaseModel):
    success: bool = True
    message: str
    eventId: int
