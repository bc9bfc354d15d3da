from pydantic import BaseModel
from typing import Optional, List


class ClubView(BaseModel):
    cid: int
    cname: str
    clubdesc: Optional[str] = None
    maxmembers: Optional[int] = None


class ClubListResponse(BaseModel):
    clubs: List[ClubView]
    userUSN: str


class StudentView(BaseModel):
    usn: str
    sname: str
    sem: int
    mobno: str
    emailid: str


class StudentListResponse(BaseModel):
    students: List[StudentView]
    currentUser: str
