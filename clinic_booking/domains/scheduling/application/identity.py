"""
Resolved caller identity.

The API layer decodes it from the request; use cases only trust it for
authorization and tenant scoping.
"""

from dataclasses import dataclass

from clinic_booking.core.domain import AuthorizationException
from clinic_booking.domains.scheduling.domain.value_objects import UserRole


@dataclass(frozen=True)
class Identity:
    user_id: str
    role: UserRole
    admin_id: int | None = None
    doctor_id: int | None = None
    patient_id: int | None = None

    @property
    def is_doctor(self) -> bool:
        return self.role == UserRole.DOCTOR

    @property
    def is_super_admin(self) -> bool:
        return self.role == UserRole.SUPER_ADMIN


def ensure_can_manage_doctor(identity: Identity | None, doctor_id: int, operation: str) -> None:
    """
    A doctor may only change data that belongs to their own doctor id.

    Raises:
        AuthorizationException: a DOCTOR identity targets another doctor
    """
    if identity is not None and identity.is_doctor and identity.doctor_id != doctor_id:
        raise AuthorizationException(operation=operation, resource=f"doctor:{doctor_id}", user_id=identity.user_id)
