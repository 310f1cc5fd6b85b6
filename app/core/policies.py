"""Access rules for profiles, expressed in Python.

Postgres is the enforcement point: the migrations install RLS policies on
``profiles`` and the ``public_profiles`` view. This module mirrors that final
rule set so the application can reason about it (and tests can check it)
without a database round trip.

Semantics follow Postgres:
- Policies are PERMISSIVE, so all policies that apply to a command and role
  are OR-combined.
- With no applicable policy a row is denied (default deny).
- Denied rows are silently omitted from reads. Nothing here raises.
- For UPDATE a policy without an explicit WITH CHECK uses its USING
  expression for the new row as well.

Every policy carries the SQL it is installed with, and the integration tests
compare ``PROFILE_POLICIES.policy_names()`` against ``pg_policies``.
"""

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any
from uuid import UUID


class Command(StrEnum):
    SELECT = "SELECT"
    INSERT = "INSERT"
    UPDATE = "UPDATE"
    DELETE = "DELETE"


class DbRole(StrEnum):
    ANON = "anon"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True)
class Caller:
    """The identity a statement runs under. ``user_id`` None means anonymous."""

    user_id: UUID | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None

    @property
    def role(self) -> DbRole:
        return DbRole.AUTHENTICATED if self.is_authenticated else DbRole.ANON


ANONYMOUS = Caller()

# Rows may be plain mappings (e.g. fetched with .mappings()) or model instances
Row = Mapping[str, Any] | Any
Predicate = Callable[[Caller, Row], bool]


def _field(row: Row, name: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(name)
    return getattr(row, name, None)


def _owns(caller: Caller, row: Row) -> bool:
    return caller.is_authenticated and _field(row, "user_id") == caller.user_id


# ─────────────────────────────────────────────────────────────────────────────
# Predicates
# ─────────────────────────────────────────────────────────────────────────────


def can_view_own_profile(caller: Caller, row: Row) -> bool:
    """A caller always sees their own full row, email included."""
    return _owns(caller, row)


def can_view_public_profile(caller: Caller, row: Row) -> bool:
    """Verified rows are visible to any authenticated caller.

    Only ever applied through ``PUBLIC_PROFILES_VIEW``, which drops the
    sensitive columns. There is no equivalent policy on the base table.
    """
    return caller.is_authenticated and _field(row, "verified") is True


def can_see_email(caller: Caller, target_user_id: UUID | None) -> bool:
    """Email is visible only to its owner.

    Mirrors ``public.can_see_user_email``. Admin and business-connection
    rules would be added here and in the SQL function together.
    """
    return caller.is_authenticated and target_user_id is not None and caller.user_id == target_user_id


def can_update_own_profile(caller: Caller, row: Row) -> bool:
    return _owns(caller, row)


def can_insert_own_profile(caller: Caller, row: Row) -> bool:
    """New rows must belong to the caller and may not be self-verified."""
    return _owns(caller, row) and not _field(row, "verified")


# ─────────────────────────────────────────────────────────────────────────────
# Policies
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Policy:
    """One permissive RLS policy bound to a relation, command and roles."""

    name: str
    relation: str
    command: Command
    roles: frozenset[DbRole]
    using: Predicate | None = None
    with_check: Predicate | None = None
    using_sql: str | None = None
    check_sql: str | None = None

    def applies_to(self, command: Command, caller: Caller) -> bool:
        return self.command == command and caller.role in self.roles

    def check_new_row(self, caller: Caller, row: Row) -> bool:
        predicate = self.with_check or self.using
        return predicate is not None and predicate(caller, row)

    def create_sql(self) -> str:
        """CREATE POLICY statement the migrations install for this policy."""
        roles = ", ".join(sorted(r.value for r in self.roles))
        sql = f'CREATE POLICY "{self.name}" ON public.{self.relation} FOR {self.command.value} TO {roles}'
        if self.using_sql:
            sql += f" USING ({self.using_sql})"
        if self.check_sql:
            sql += f" WITH CHECK ({self.check_sql})"
        return sql


@dataclass(frozen=True)
class PolicySet:
    """All policies on one relation, OR-combined per command."""

    relation: str
    policies: tuple[Policy, ...] = field(default_factory=tuple)

    def applicable(self, command: Command, caller: Caller) -> list[Policy]:
        return [p for p in self.policies if p.applies_to(command, caller)]

    def allows(self, command: Command, caller: Caller, row: Row) -> bool:
        """Whether an existing row is visible to ``command`` (USING side).

        For INSERT there is no existing row, so the new row is checked.
        """
        policies = self.applicable(command, caller)
        if command == Command.INSERT:
            return any(p.check_new_row(caller, row) for p in policies)
        return any(p.using is not None and p.using(caller, row) for p in policies)

    def allows_write(
        self,
        command: Command,
        caller: Caller,
        new_row: Row,
        old_row: Row | None = None,
    ) -> bool:
        """Whether a write succeeds.

        UPDATE needs the old row to pass some USING expression and the new
        row to pass some WITH CHECK expression.
        """
        if command == Command.UPDATE:
            if old_row is None or not self.allows(Command.UPDATE, caller, old_row):
                return False
            return any(p.check_new_row(caller, new_row) for p in self.applicable(command, caller))
        if command == Command.INSERT:
            return self.allows(Command.INSERT, caller, new_row)
        return self.allows(command, caller, new_row)

    def filter_rows(self, caller: Caller, rows: Iterable[Row]) -> list[Row]:
        """Rows a SELECT by ``caller`` would return."""
        return [row for row in rows if self.allows(Command.SELECT, caller, row)]

    def policy_names(self) -> set[str]:
        return {p.name for p in self.policies}


# ─────────────────────────────────────────────────────────────────────────────
# Views
# ─────────────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class ViewDefinition:
    """A column projection plus a row filter over a base relation."""

    name: str
    relation: str
    columns: tuple[str, ...]
    predicate: Predicate

    def project(self, row: Row) -> dict[str, Any]:
        return {column: _field(row, column) for column in self.columns}

    def rows(self, caller: Caller, rows: Iterable[Row]) -> list[dict[str, Any]]:
        return [self.project(row) for row in rows if self.predicate(caller, row)]


# ─────────────────────────────────────────────────────────────────────────────
# Final state of the profiles rule set
# ─────────────────────────────────────────────────────────────────────────────

SENSITIVE_PROFILE_COLUMNS: frozenset[str] = frozenset(
    {
        "email",
        "updated_at",
        "subscription_plan",
        "subscription_status",
        "subscription_start_date",
        "subscription_end_date",
        "subscription_price",
        "subscription_currency",
    }
)

PUBLIC_PROFILE_COLUMNS: tuple[str, ...] = (
    "id",
    "user_id",
    "first_name",
    "last_name",
    "title",
    "specialty",
    "organization",
    "country",
    "profile_type",
    "created_at",
    "avatar_url",
    "verified",
    "primary_specialty_slug",
)

# Columns `authenticated` holds UPDATE on. Everything else is read-only to users.
PROFILE_UPDATABLE_COLUMNS: frozenset[str] = frozenset(
    {
        "first_name",
        "last_name",
        "title",
        "specialty",
        "organization",
        "country",
        "avatar_url",
        "primary_specialty_slug",
        "subspecialties",
    }
)

# Columns `authenticated` holds INSERT on. verified is included but the insert
# policy only accepts false.
PROFILE_INSERTABLE_COLUMNS: frozenset[str] = PROFILE_UPDATABLE_COLUMNS | frozenset(
    {"id", "user_id", "email", "profile_type", "verified"}
)

# Written only by the table owner (signup), never by the row's user
SUBSCRIPTION_COLUMNS: frozenset[str] = frozenset(
    c for c in SENSITIVE_PROFILE_COLUMNS if c.startswith("subscription_")
)

_OWNER_SQL = "user_id = public.app_user_id()"

PROFILE_POLICIES = PolicySet(
    relation="profiles",
    policies=(
        Policy(
            name="Users can view own profile",
            relation="profiles",
            command=Command.SELECT,
            roles=frozenset({DbRole.AUTHENTICATED}),
            using=can_view_own_profile,
            using_sql=_OWNER_SQL,
        ),
        Policy(
            name="Users can insert own profile",
            relation="profiles",
            command=Command.INSERT,
            roles=frozenset({DbRole.AUTHENTICATED}),
            with_check=can_insert_own_profile,
            check_sql=f"{_OWNER_SQL} AND verified = false",
        ),
        Policy(
            name="Users can update own profile",
            relation="profiles",
            command=Command.UPDATE,
            roles=frozenset({DbRole.AUTHENTICATED}),
            using=can_update_own_profile,
            with_check=can_update_own_profile,
            using_sql=_OWNER_SQL,
            check_sql=_OWNER_SQL,
        ),
    ),
)

PUBLIC_PROFILES_VIEW = ViewDefinition(
    name="public_profiles",
    relation="profiles",
    columns=PUBLIC_PROFILE_COLUMNS,
    predicate=can_view_public_profile,
)
