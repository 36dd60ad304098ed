"""
Authorization rules checked before the scheduling engine is called.
"""

from ..core.security import UserRole


def is_admin(actor) -> bool:
    return UserRole(actor.role) == UserRole.ADMIN


def can_manage_appointment(actor, appointment) -> bool:
    """Admins manage every appointment, everyone else only their own."""
    return is_admin(actor) or appointment.patient_id == actor.id


def can_access_user(actor, user_id: int) -> bool:
    return is_admin(actor) or actor.id == user_id


def can_book_appointments(actor) -> bool:
    return UserRole(actor.role) in (UserRole.ADMIN, UserRole.PATIENT)
