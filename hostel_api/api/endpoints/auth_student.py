# hostel_api/api/endpoints/auth_student.py

from typing import Optional

from fastapi import APIRouter, Depends, status
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_api.api.deps import get_db_session, get_roster
from hostel_api.core.config import settings
from hostel_api.core.errors import ApiError, DuplicateEntryError, internal_error
from hostel_api.core.validation import is_blank
from hostel_api.schemas.auth_student import StudentLoginRequest, StudentLoginResponse
from hostel_api.schemas.student import StudentRead, StudentSignup
from hostel_api.services.auth_service import authenticate_student
from hostel_api.services.roster_service import RosterClient
from hostel_api.services.student_service import register_student

router = APIRouter(prefix="/api", tags=["Auth"])


# ------------------------------------------------------------
# STUDENT SIGNUP (PUBLIC)
# ------------------------------------------------------------
@router.post("/signup", status_code=status.HTTP_201_CREATED)
async def signup(
    data: Optional[StudentSignup] = None,
    session: AsyncSession = Depends(get_db_session),
    roster: Optional[RosterClient] = Depends(get_roster),
):
    data = data or StudentSignup()

    try:
        student = await register_student(session, data, roster)

    except ApiError:
        raise
    except DuplicateEntryError as e:
        logger.warning(f"Signup conflict for {data.roll_no}: {e}")
        raise ApiError(409, str(e))
    except Exception as e:
        raise internal_error(e, "Signup")

    response = {
        "success": True,
        "message": "Student registered successfully",
        "roll_no": student.roll_no,
    }
    if settings.SIGNUP_MODE == "roster":
        response.update(
            full_name=student.full_name,
            gender=student.gender,
            email=student.email,
        )
    return response


# ------------------------------------------------------------
# STUDENT LOGIN
# ------------------------------------------------------------
@router.post("/login", response_model=StudentLoginResponse)
async def login(
    data: Optional[StudentLoginRequest] = None,
    session: AsyncSession = Depends(get_db_session),
):
    data = data or StudentLoginRequest()

    if is_blank(data.username) or is_blank(data.password):
        raise ApiError(400, "Username and password are required")

    try:
        student = await authenticate_student(session, data.username, data.password)
    except Exception as e:
        raise internal_error(e, "Login")

    if not student:
        logger.info(f"Failed login for {data.username.strip()}")
        raise ApiError(401, "Invalid credentials")

    return StudentLoginResponse(student=StudentRead.model_validate(student))
