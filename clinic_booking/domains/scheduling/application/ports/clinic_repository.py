"""
Clinic and Doctor Repository Ports
"""

from typing import Protocol, runtime_checkable

from clinic_booking.domains.scheduling.domain.entities import Clinic, Doctor


@runtime_checkable
class IClinicRepository(Protocol):
    """Clinic data access."""

    async def get(self, clinic_id: int) -> Clinic | None:
        ...

    async def add(self, clinic: Clinic) -> Clinic:
        ...

    async def update(self, clinic: Clinic) -> Clinic:
        ...

    async def delete(self, clinic_id: int) -> bool:
        """Delete a clinic together with its schedule entries."""
        ...

    async def list_clinics(
        self,
        admin_id: int | None = None,
        doctor_id: int | None = None,
    ) -> list[Clinic]:
        """List clinics ordered by name."""
        ...


@runtime_checkable
class IDoctorRepository(Protocol):
    """Read access to doctors."""

    async def get(self, doctor_id: int) -> Doctor | None:
        ...
