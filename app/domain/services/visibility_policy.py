"""Domain service deciding which member fields a caller may see."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, FrozenSet, Iterable, Optional, Sequence, Tuple

from app.domain.fields import parse_fields, without
from app.domain.value_objects import CallerIdentity, VisibilityTier


def _frozen(names: Iterable[str]) -> FrozenSet[str]:
    return frozenset(name.lower() for name in names)


@dataclass(frozen=True)
class RoleConfiguration:
    """Role names granting each capability, compared case-insensitively."""

    admin_roles: FrozenSet[str] = field(default_factory=frozenset)
    autocomplete_roles: FrozenSet[str] = field(default_factory=frozenset)
    search_by_email_roles: FrozenSet[str] = field(default_factory=frozenset)

    @classmethod
    def from_names(
        cls,
        admin_roles: Iterable[str],
        autocomplete_roles: Iterable[str],
        search_by_email_roles: Iterable[str],
    ) -> "RoleConfiguration":
        return cls(
            admin_roles=_frozen(admin_roles),
            autocomplete_roles=_frozen(autocomplete_roles),
            search_by_email_roles=_frozen(search_by_email_roles),
        )


class FieldVisibilityPolicy:
    """Computes the output field set for a caller.

    The policy is a pure function of the caller, the requested field list and
    the canonical registry of the endpoint:

    - secure fields are removed unless the caller is M2M or an administrator
    - communication fields are removed unless the caller is M2M or holds an
      autocomplete role
    """

    def __init__(
        self,
        roles: RoleConfiguration,
        secure_fields: Sequence[str] = (),
        communication_fields: Sequence[str] = (),
    ):
        self.roles = roles
        self.secure_fields: Tuple[str, ...] = tuple(secure_fields)
        self.communication_fields: Tuple[str, ...] = tuple(communication_fields)

    def has_admin_role(self, caller: Optional[CallerIdentity]) -> bool:
        return caller is not None and caller.has_any_role(self.roles.admin_roles)

    def has_autocomplete_role(self, caller: Optional[CallerIdentity]) -> bool:
        return caller is not None and caller.has_any_role(self.roles.autocomplete_roles)

    def has_search_by_email_role(self, caller: Optional[CallerIdentity]) -> bool:
        return caller is not None and caller.has_any_role(self.roles.search_by_email_roles)

    def is_trusted(self, caller: Optional[CallerIdentity]) -> bool:
        """M2M principals and administrators see every field."""
        return caller is not None and (caller.is_machine or self.has_admin_role(caller))

    def resolve(
        self,
        caller: Optional[CallerIdentity],
        requested_fields: Optional[str],
        canonical_fields: Sequence[str],
    ) -> Tuple[str, ...]:
        """Return the ordered fields ``caller`` may receive."""
        fields = parse_fields(requested_fields, canonical_fields)

        if not self.is_trusted(caller):
            fields = without(fields, self.secure_fields)

        if caller is None or not (caller.is_machine or self.has_autocomplete_role(caller)):
            fields = without(fields, self.communication_fields)

        return fields

    def statistics_tier(self, caller: Optional[CallerIdentity], member_user_id: Any) -> VisibilityTier:
        """Members reading their own statistics, admins and M2M callers read the private tier."""
        if caller is None:
            return VisibilityTier.PUBLIC
        if self.is_trusted(caller) or caller.is_member(member_user_id):
            return VisibilityTier.PRIVATE
        return VisibilityTier.PUBLIC


__all__ = ["RoleConfiguration", "FieldVisibilityPolicy"]
