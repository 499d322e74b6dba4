# hostel_api/api/endpoints/students.py

from typing import Optional

from fastapi import APIRouter, Depends
from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_api.api.deps import get_db_session
from hostel_api.core.config import settings
from hostel_api.core.errors import ApiError, DuplicateEntryError, internal_error
from hostel_api.core.validation import ensure_roll_no
from hostel_api.schemas.student import StudentProfileResponse, StudentRead, StudentUpdate
from hostel_api.services.student_service import (
    StudentNotFoundError,
    get_student_profile,
    update_student_profile,
)

router = APIRouter(
    prefix="/api/student",
    tags=["Students"]
)


# ------------------------------------------------------------
# GET PROFILE
# ------------------------------------------------------------
@router.get("/{roll_no}", response_model=StudentProfileResponse)
async def get_profile(
    roll_no: str,
    session: AsyncSession = Depends(get_db_session),
):
    ensure_roll_no(roll_no)

    try:
        row = await get_student_profile(session, roll_no)
    except Exception as e:
        raise internal_error(e, "Profile read")

    if not row:
        raise ApiError(404, "Student not found")

    return StudentProfileResponse(student=StudentRead.model_validate(row))


# ------------------------------------------------------------
# UPDATE PROFILE
# ------------------------------------------------------------
@router.put("/{roll_no}")
async def update_profile(
    roll_no: str,
    data: Optional[StudentUpdate] = None,
    session: AsyncSession = Depends(get_db_session),
):
    ensure_roll_no(roll_no)
    data = data or StudentUpdate()

    try:
        student, updated_fields = await update_student_profile(session, roll_no, data)

    except ApiError:
        raise
    except StudentNotFoundError:
        raise ApiError(404, "Student not found")
    except DuplicateEntryError as e:
        logger.warning(f"Profile update conflict for {roll_no}: {e}")
        raise ApiError(409, str(e))
    except Exception as e:
        raise internal_error(e, "Profile update")

    response = {
        "success": True,
        "message": "Profile updated successfully",
        "roll_no": roll_no,
    }
    if settings.PROFILE_UPDATE_MODE == "dynamic":
        response["updated_fields"] = updated_fields
        response["student"] = StudentRead.model_validate(student).model_dump(mode="json")
    return response
