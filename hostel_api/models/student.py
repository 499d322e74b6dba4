from sqlmodel import SQLModel, Field, Column
from sqlalchemy import Boolean, DateTime, String, UniqueConstraint, false, func
from datetime import datetime
from typing import Optional


class Student(SQLModel, table=True):
    __tablename__ = "students"
    __table_args__ = (
        UniqueConstraint("email", name="uq_students_email"),
        UniqueConstraint("mobile_no", name="uq_students_mobile_no"),
    )

    # 8 digits, immutable after signup
    roll_no: str = Field(
        sa_column=Column(String(8), primary_key=True)
    )

    full_name: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    # Copied from the roster in roster-gated signup
    gender: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    room_no: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    hostel_no: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )
    profile_pic_url: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    email: Optional[str] = Field(
        default=None, sa_column=Column(String, nullable=True)
    )

    mobile_no: str = Field(
        sa_column=Column(String(10), nullable=False)
    )

    password_hash: str = Field(
        sa_column=Column(String, nullable=False)
    )

    email_verified: bool = Field(
        default=False,
        sa_column=Column(Boolean, nullable=False, default=False, server_default=false())
    )

    created_at: Optional[datetime] = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    )
