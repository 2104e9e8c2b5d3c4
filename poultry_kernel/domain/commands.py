"""
Commands -- typed update commands for mutable records.

Each command carries exactly the fields one kind of edit is allowed to
change, so an update can never touch fields outside its policy (for
example, an edit of a flock's breed cannot silently reset its mortality).
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from uuid import UUID


@dataclass(frozen=True)
class SetFlockActive:
    """Archive (False) or reactivate (True) a flock."""

    flock_id: UUID
    is_active: bool


@dataclass(frozen=True)
class RenameBreed:
    flock_id: UUID
    breed: str


@dataclass(frozen=True)
class CorrectLayerCount:
    """Overwrite the head count after a physical count."""

    flock_id: UUID
    number_of_layers: int


@dataclass(frozen=True)
class CorrectFlockAge:
    flock_id: UUID
    age_weeks: int
    start_date: date


FlockCommand = SetFlockActive | RenameBreed | CorrectLayerCount | CorrectFlockAge


@dataclass(frozen=True)
class RescheduleVaccination:
    vaccination_id: UUID
    scheduled_date: date


@dataclass(frozen=True)
class UpdateVaccinationNotes:
    vaccination_id: UUID
    notes: str


VaccinationCommand = RescheduleVaccination | UpdateVaccinationNotes
