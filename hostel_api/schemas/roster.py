from pydantic import BaseModel


class RosterEntry(BaseModel):
    roll_no: str
    full_name: str
    gender: str
