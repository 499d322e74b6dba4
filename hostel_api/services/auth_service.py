# hostel_api/services/auth_service.py

from sqlmodel import select
from sqlalchemy import or_
from sqlalchemy.ext.asyncio import AsyncSession

from hostel_api.models.student import Student
from hostel_api.core.security import verify_password_async


# ============================================================================
# FIND STUDENT BY ANY LOGIN IDENTIFIER
# ============================================================================
async def get_student_by_identifier(session: AsyncSession, identifier: str) -> Student | None:
    """
    roll_no, mobile_no, or email. Email is compared exactly, the same way
    its unique constraint compares it, so at most one row can match.
    """
    result = await session.execute(
        select(Student).where(
            or_(
                Student.roll_no == identifier,
                Student.mobile_no == identifier,
                Student.email == identifier,
            )
        )
    )
    return result.scalars().first()


# ============================================================================
# AUTHENTICATE STUDENT LOGIN
# ============================================================================
async def authenticate_student(
    session: AsyncSession,
    username: str,
    password: str
) -> Student | None:
    """
    Returns the student on success and None otherwise. Unknown usernames and
    wrong passwords are indistinguishable to the caller.
    """
    username = username.strip()

    student = await get_student_by_identifier(session, username)
    if not student:
        return None

    if not await verify_password_async(password, student.password_hash):
        return None

    return student
