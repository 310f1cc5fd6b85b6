"""Profile model - one row per Supabase user, guarded by RLS."""

import uuid as uuid_pkg
from datetime import datetime
from enum import Enum

from pydantic import field_validator
from sqlalchemy import Column, DateTime, Index, Integer, String, Text, text
from sqlalchemy import Enum as SAEnum
from sqlalchemy.dialects.postgresql import ARRAY
from sqlmodel import Field, SQLModel

from app.models.base import AuthOwnedMixin, TimestampMixin, UUIDMixin


class SubscriptionPlan(str, Enum):
    """Values of the subscription_plan enum type."""

    MEDICAL_INSTITUTE_BUYERS = "medical_institute_buyers"
    MEDICAL_SELLERS_MONTHLY = "medical_sellers_monthly"
    MEDICAL_SELLERS_YEARLY = "medical_sellers_yearly"
    MEDICAL_PERSONNEL = "medical_personnel"


class ProfileType(str, Enum):
    BUYER = "buyer"
    SELLER = "seller"
    MEDICAL_PROFESSIONAL = "medical_professional"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class Profile(UUIDMixin, AuthOwnedMixin, TimestampMixin, SQLModel, table=True):
    """
    Profile model - public-facing details of a marketplace user.

    Reads and writes through the API always run as the `authenticated` role
    with app.current_user_id set, so Postgres only ever returns the caller's
    own row here. Other users are read through PublicProfile.

    Sensitive columns (email, updated_at, subscription_*) never leave this
    table except to the row owner.
    """

    __tablename__ = "profiles"
    __table_args__ = (
        Index("idx_profiles_primary_specialty_slug", "primary_specialty_slug"),
        Index("idx_profiles_subspecialties", "subspecialties", postgresql_using="gin"),
    )

    email: str = Field(nullable=False)
    first_name: str = Field(nullable=False)
    last_name: str = Field(nullable=False)
    title: str | None = Field(default=None)
    specialty: str | None = Field(default=None)
    organization: str | None = Field(default=None)
    country: str | None = Field(default=None)
    profile_type: str = Field(nullable=False)
    verified: bool = Field(
        default=False,
        nullable=False,
        sa_column_kwargs={"server_default": text("false")},
    )
    avatar_url: str | None = Field(default=None)

    # Specialty taxonomy
    primary_specialty_slug: str | None = Field(default=None)
    subspecialties: list[str] | None = Field(default=None, sa_column=Column(ARRAY(Text), nullable=True))

    # Subscription: written by the table owner at signup. Python defaults stay
    # None so an INSERT by `authenticated` never names these columns.
    subscription_plan: SubscriptionPlan | None = Field(
        default=None,
        sa_column=Column(
            SAEnum(
                SubscriptionPlan,
                name="subscription_plan",
                create_type=False,
                values_callable=lambda e: [m.value for m in e],
            ),
            nullable=True,
        ),
    )
    subscription_status: str | None = Field(
        default=None,
        sa_column=Column(Text, server_default=text("'active'")),
    )
    subscription_start_date: datetime | None = Field(
        default=None,
        sa_column=Column(DateTime(timezone=True), server_default=text("now()")),
    )
    subscription_end_date: datetime | None = Field(  # type: ignore[call-overload]
        default=None, sa_type=DateTime(timezone=True)
    )
    subscription_price: int | None = Field(
        default=None,
        sa_column=Column(Integer, server_default=text("0")),
    )
    subscription_currency: str | None = Field(
        default=None,
        sa_column=Column(String, server_default=text("'usd'")),
    )


class ProfileCreate(SQLModel):
    """Schema for creating the caller's own profile. Email comes from the JWT."""

    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    profile_type: ProfileType
    title: str | None = None
    specialty: str | None = None
    organization: str | None = None
    country: str | None = None
    avatar_url: str | None = None
    primary_specialty_slug: str | None = None
    subspecialties: list[str] | None = None


class ProfileUpdate(SQLModel):
    """Schema for updating a profile. Only columns users hold UPDATE on."""

    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    title: str | None = None
    specialty: str | None = None
    organization: str | None = None
    country: str | None = None
    avatar_url: str | None = None
    primary_specialty_slug: str | None = None
    subspecialties: list[str] | None = None

    @field_validator("first_name", "last_name")
    @classmethod
    def reject_null_name(cls, value: str | None) -> str:
        # Omit the key to leave a name unchanged; the columns are NOT NULL
        if value is None:
            raise ValueError("may not be null")
        return value


class ProfileRead(SQLModel):
    """The owner's full view of their profile."""

    id: uuid_pkg.UUID
    user_id: uuid_pkg.UUID
    email: str
    first_name: str
    last_name: str
    title: str | None
    specialty: str | None
    organization: str | None
    country: str | None
    profile_type: str
    verified: bool
    avatar_url: str | None
    primary_specialty_slug: str | None
    subspecialties: list[str] | None
    subscription_plan: SubscriptionPlan | None
    subscription_status: str | None
    subscription_start_date: datetime | None
    subscription_end_date: datetime | None
    subscription_price: int | None
    subscription_currency: str | None
    created_at: datetime
    updated_at: datetime
