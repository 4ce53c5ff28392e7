# propease/policies/rbac.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Set

from propease.models.enums import Role


@dataclass(frozen=True)
class Principal:
    user_id: str
    username: str
    role: Role
    full_name: str
    request_id: Optional[str] = None


SYSTEM = Principal(user_id="system", username="system", role=Role.ADMIN, full_name="System")


# --- Admin-only action constants ---
ACTION_REGISTER_PROJECT = "REGISTER_PROJECT"
ACTION_UPDATE_PROJECT = "UPDATE_PROJECT"
ACTION_DELETE_PROJECT = "DELETE_PROJECT"
ACTION_MANAGE_USERS = "MANAGE_USERS"
ACTION_EXPORT_SNAPSHOT = "EXPORT_SNAPSHOT"
ACTION_IMPORT_SNAPSHOT = "IMPORT_SNAPSHOT"

ADMIN_ACTIONS = {
    ACTION_REGISTER_PROJECT,
    ACTION_UPDATE_PROJECT,
    ACTION_DELETE_PROJECT,
    ACTION_MANAGE_USERS,
    ACTION_EXPORT_SNAPSHOT,
    ACTION_IMPORT_SNAPSHOT,
}


def allowed_actions(role: Role) -> Set[str]:
    """
    Pure RBAC: which restricted actions a role may attempt.
    Day-to-day sales work (clients, enquiries, bookings, follow-ups) is open
    to every signed-in user.
    """
    if role == Role.ADMIN:
        return set(ADMIN_ACTIONS)
    return set()


def require_action(principal: Principal, action: str) -> None:
    if action not in allowed_actions(principal.role):
        raise PermissionError(
            f"Role {principal.role.value} not permitted for action {action}."
        )
