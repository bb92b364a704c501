from sqlmodel import SQLModel, Field
from typing import Optional, List


class Team(SQLModel):
    id: str
    name: str = ""
    lead_id: Optional[str] = None
    member_ids: List[str] = Field(default_factory=list)

    def all_member_ids(self) -> List[str]:
        """Members plus the lead, lead last, without repeats."""
        ids = list(dict.fromkeys(self.member_ids))
        if self.lead_id and self.lead_id not in ids:
            ids.append(self.lead_id)
        return ids
