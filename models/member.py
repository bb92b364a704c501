from sqlmodel import SQLModel
from typing import Optional


class Member(SQLModel):
    id: str
    name: Optional[str] = None
    designation: Optional[str] = None
    team_id: Optional[str] = None
    team_name: Optional[str] = None
