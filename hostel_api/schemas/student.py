# hostel_api/schemas/student.py
from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


# ------------------------------------------------------------
# SIGNUP (Public)
# ------------------------------------------------------------
class StudentSignup(BaseModel):
    """
    Every field is optional here. Which ones are required depends on the
    signup mode and is checked by the service, so a missing field is a
    "Missing required fields" error rather than a schema error.
    """
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    roll_no: Optional[str] = None
    mobile_no: Optional[str] = None
    password: Optional[str] = None
    email: Optional[str] = None

    full_name: Optional[str] = None
    room_no: Optional[str] = None
    hostel_no: Optional[str] = None
    profile_pic_url: Optional[str] = None


PROFILE_SIGNUP_REQUIRED = (
    "full_name",
    "roll_no",
    "room_no",
    "hostel_no",
    "password",
    "email",
    "mobile_no",
)

ROSTER_SIGNUP_REQUIRED = ("roll_no", "mobile_no", "password")


# ------------------------------------------------------------
# PROFILE UPDATE
# ------------------------------------------------------------
class StudentUpdate(BaseModel):
    """The full set of columns a client may ever change. roll_no is not one."""
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    full_name: Optional[str] = None
    gender: Optional[str] = None
    room_no: Optional[str] = None
    hostel_no: Optional[str] = None
    profile_pic_url: Optional[str] = None
    email: Optional[str] = None
    mobile_no: Optional[str] = None
    email_verified: Optional[bool] = None


# Fixed mode always writes all of these, absent ones as null
FIXED_UPDATE_FIELDS = (
    "full_name",
    "room_no",
    "hostel_no",
    "profile_pic_url",
    "email",
    "mobile_no",
)

# Dynamic mode writes the intersection of these with the request keys
DYNAMIC_UPDATE_FIELDS = (
    "full_name",
    "gender",
    "room_no",
    "hostel_no",
    "profile_pic_url",
    "email",
    "mobile_no",
    "email_verified",
)


# ------------------------------------------------------------
# STUDENT READ RESPONSE (never carries password_hash)
# ------------------------------------------------------------
class StudentRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    roll_no: str
    full_name: Optional[str] = None
    gender: Optional[str] = None
    room_no: Optional[str] = None
    hostel_no: Optional[str] = None
    profile_pic_url: Optional[str] = None
    email: Optional[str] = None
    mobile_no: str
    email_verified: bool = False
    created_at: Optional[datetime] = None


class StudentProfileResponse(BaseModel):
    success: bool = True
    student: StudentRead
