"""Domain layer for identity: users and memberships."""

from identity.domain.value_objects import Membership, MembershipStatus, User

__all__ = ["Membership", "MembershipStatus", "User"]
