"""Abstract repository for RepairJob entities."""

from __future__ import annotations

from abc import ABC, abstractmethod

from phoneshop.domain.model.repair_job import RepairJob


class RepairJobRepository(ABC):

    @abstractmethod
    def get_by_id(self, job_id: int) -> RepairJob | None:
        """Return a repair job by its ID, or None if not found."""

    @abstractmethod
    def list_for_unit(self, unit_id: int) -> list[RepairJob]:
        """Return every repair job of a unit, oldest first."""

    @abstractmethod
    def save(self, job: RepairJob) -> None:
        """Persist a new or updated repair job, assigning its ID."""
