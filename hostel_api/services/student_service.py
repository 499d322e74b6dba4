# hostel_api/services/student_service.py

from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select
from sqlalchemy.exc import IntegrityError
from loguru import logger

from hostel_api.core.config import settings
from hostel_api.core.errors import ApiError, DuplicateEntryError, classify_integrity_error
from hostel_api.core.security import hash_password_async
from hostel_api.core.validation import ensure_mobile_no, ensure_roll_no, is_blank, require_fields
from hostel_api.models.student import Student
from hostel_api.schemas.student import (
    DYNAMIC_UPDATE_FIELDS,
    FIXED_UPDATE_FIELDS,
    PROFILE_SIGNUP_REQUIRED,
    ROSTER_SIGNUP_REQUIRED,
    StudentSignup,
    StudentUpdate,
)
from hostel_api.services.roster_service import (
    InvalidRosterEntry,
    RosterClient,
    RosterEntryNotFound,
)


class StudentNotFoundError(LookupError):
    pass


# Columns a profile read may return. password_hash is never one of them.
PUBLIC_COLUMNS = (
    Student.roll_no,
    Student.full_name,
    Student.gender,
    Student.room_no,
    Student.hostel_no,
    Student.profile_pic_url,
    Student.email,
    Student.mobile_no,
    Student.email_verified,
    Student.created_at,
)


async def _commit_or_classify(session: AsyncSession) -> None:
    """Commit, turning a unique violation into DuplicateEntryError."""
    try:
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        duplicate = classify_integrity_error(e)
        if duplicate is not None:
            raise duplicate from e
        raise


# ------------------------------------------------------------
# SIGNUP
# ------------------------------------------------------------
async def _resolve_roster_identity(roster: RosterClient | None, roll_no: str):
    if roster is None:
        raise RuntimeError("Roster lookup is not configured (REDIS_URL is not set)")

    try:
        return await roster.get_entry(roll_no)
    except RosterEntryNotFound:
        raise ApiError(404, "Roll number not found in student database", roll_no=roll_no)
    except InvalidRosterEntry:
        raise ApiError(400, "Invalid student data in database", roll_no=roll_no)


async def register_student(
    session: AsyncSession,
    data: StudentSignup,
    roster: RosterClient | None = None,
) -> Student:
    """
    Validates and inserts a new student.

    Checks run in a fixed order and the first failure wins:

        1. required fields present (set depends on SIGNUP_MODE)
        2. roll_no format
        3. mobile_no format
        4. roster membership (roster mode only)

    In roster mode full_name and gender come from the roster entry and any
    client-supplied values are ignored.
    """
    roster_mode = settings.SIGNUP_MODE == "roster"
    required = ROSTER_SIGNUP_REQUIRED if roster_mode else PROFILE_SIGNUP_REQUIRED

    require_fields(data.model_dump(), required)
    roll_no = ensure_roll_no(data.roll_no)
    mobile_no = ensure_mobile_no(data.mobile_no)

    if roster_mode:
        entry = await _resolve_roster_identity(roster, roll_no)
        student = Student(
            roll_no=roll_no,
            full_name=entry.full_name,
            gender=entry.gender,
            email=None if is_blank(data.email) else data.email,
            mobile_no=mobile_no,
            password_hash=await hash_password_async(data.password),
        )
    else:
        student = Student(
            roll_no=roll_no,
            full_name=data.full_name,
            room_no=data.room_no,
            hostel_no=data.hostel_no,
            profile_pic_url=None if is_blank(data.profile_pic_url) else data.profile_pic_url,
            email=data.email,
            mobile_no=mobile_no,
            password_hash=await hash_password_async(data.password),
        )

    session.add(student)
    try:
        await _commit_or_classify(session)
    except DuplicateEntryError:
        # A repeated signup collides on several unique columns at once and
        # the store picks which one it reports. An existing roll_no wins.
        if await session.get(Student, roll_no) is not None:
            raise DuplicateEntryError("roll_no")
        raise

    logger.info(f"Registered student {roll_no}")
    return student


# ------------------------------------------------------------
# GET PROFILE
# ------------------------------------------------------------
async def get_student_profile(session: AsyncSession, roll_no: str) -> dict | None:
    result = await session.execute(
        select(*PUBLIC_COLUMNS).where(Student.roll_no == roll_no)
    )
    row = result.mappings().first()
    return dict(row) if row else None


async def get_student_by_roll_no(session: AsyncSession, roll_no: str) -> Student | None:
    return await session.get(Student, roll_no)


# ------------------------------------------------------------
# UPDATE PROFILE
# ------------------------------------------------------------
def _update_values(data: StudentUpdate) -> dict:
    if settings.PROFILE_UPDATE_MODE == "fixed":
        if is_blank(data.mobile_no):
            raise ApiError(400, "Mobile number is required")
        values = data.model_dump(include=set(FIXED_UPDATE_FIELDS))
    else:
        # Only keys the client actually sent; explicit nulls stay null
        values = data.model_dump(include=set(DYNAMIC_UPDATE_FIELDS), exclude_unset=True)
        if not values:
            raise ApiError(
                400,
                "No valid fields provided for update",
                allowed=list(DYNAMIC_UPDATE_FIELDS),
            )

    if "mobile_no" in values:
        ensure_mobile_no(values["mobile_no"])

    # email_verified is NOT NULL; a null resets it to its default
    if "email_verified" in values and values["email_verified"] is None:
        values["email_verified"] = False

    return values


async def update_student_profile(
    session: AsyncSession,
    roll_no: str,
    data: StudentUpdate,
) -> tuple[Student, list[str]]:
    """
    Applies a profile update and returns the re-read row together with the
    names of the columns that were written.
    """
    student = await get_student_by_roll_no(session, roll_no)
    if not student:
        raise StudentNotFoundError(roll_no)

    values = _update_values(data)

    for key, value in values.items():
        setattr(student, key, value)

    await _commit_or_classify(session)
    await session.refresh(student)

    # Keep the order of the allow-list, not of the request body
    updated_fields = [f for f in DYNAMIC_UPDATE_FIELDS if f in values]
    logger.info(f"Updated student {roll_no}: {', '.join(updated_fields)}")
    return student, updated_fields
