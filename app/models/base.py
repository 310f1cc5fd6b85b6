import uuid as uuid_pkg
from datetime import datetime

from sqlalchemy import DateTime, text
from sqlmodel import Field, SQLModel


class UUIDMixin(SQLModel):
    """UUID primary key, generated client-side with a gen_random_uuid() fallback."""

    id: uuid_pkg.UUID = Field(
        default_factory=uuid_pkg.uuid4,
        primary_key=True,
        nullable=False,
        sa_column_kwargs={"server_default": text("gen_random_uuid()")},
    )


class TimestampMixin(SQLModel):
    """created_at / updated_at as timestamptz, filled in by Postgres.

    Both are None until the row is flushed and refreshed, so an INSERT never
    names them. updated_at has no ORM onupdate. The update_updated_at_column()
    trigger sets it on every UPDATE, including writes made outside the ORM.
    """

    created_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )
    updated_at: datetime | None = Field(  # type: ignore[call-overload]
        default=None,
        nullable=False,
        sa_type=DateTime(timezone=True),
        sa_column_kwargs={"server_default": text("now()")},
    )


class AuthOwnedMixin(SQLModel):
    """Row owned by exactly one Supabase auth identity.

    No foreign key: auth.users lives in Supabase's own schema, which plain
    Postgres test databases do not have.
    """

    user_id: uuid_pkg.UUID = Field(
        nullable=False,
        unique=True,
        description="UUID from Supabase auth.users",
    )
