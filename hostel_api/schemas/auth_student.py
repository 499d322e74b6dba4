from pydantic import BaseModel, ConfigDict
from typing import Optional

from hostel_api.schemas.student import StudentRead

class StudentLoginRequest(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    username: Optional[str] = None    # <-- roll_no OR email OR mobile_no
    password: Optional[str] = None

class StudentLoginResponse(BaseModel):
    success: bool = True
    message: str = "Login successful"
    student: StudentRead
