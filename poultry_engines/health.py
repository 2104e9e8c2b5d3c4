"""
Module: poultry_engines.health
Responsibility:
    Vaccination schedule and disease records.

Architecture position:
    Engines -- pure state transitions and read-time derivations, zero I/O.

Invariants enforced:
    - Vaccination: scheduled -> completed (terminal); scheduled -> overdue
      is derived at read time only and never written.
    - mark_vaccination_complete works from any status and stamps the
      administered date.
    - Disease: active -> resolved (terminal).  A treatment cost posts one
      medication debit when the record is created; resolving posts nothing.

Failure modes:
    - InvalidQuantityError for negative affected birds or treatment cost.
    - Unknown vaccination / disease ids are a logged no-op.
"""

from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from typing import Any
from uuid import UUID, uuid4

from poultry_engines._validation import require_count, require_non_negative, require_text
from poultry_engines.ledger import post_transaction
from poultry_engines.tracer import traced_engine
from poultry_kernel.domain.commands import (
    RescheduleVaccination,
    UpdateVaccinationNotes,
    VaccinationCommand,
)
from poultry_kernel.domain.records import DiseaseRecord, FarmState, Vaccination
from poultry_kernel.domain.vocabulary import (
    DiseaseStatus,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    VaccinationStatus,
)
from poultry_kernel.logging_config import get_logger

logger = get_logger("engines.health")


# ---------------------------------------------------------------------------
# Vaccinations
# ---------------------------------------------------------------------------


def effective_vaccination_status(vaccination: Vaccination, today: date) -> VaccinationStatus:
    """Status as presented on ``today``: scheduled and past due reads as overdue."""
    if (
        vaccination.status == VaccinationStatus.SCHEDULED
        and vaccination.scheduled_date < today
    ):
        return VaccinationStatus.OVERDUE
    return vaccination.status


def present_vaccinations(state: FarmState, today: date) -> tuple[Vaccination, ...]:
    """Copies of the stored vaccinations carrying their derived status."""
    return tuple(
        replace(v, status=effective_vaccination_status(v, today))
        for v in state.vaccinations
    )


def _replace_vaccination(state: FarmState, vaccination_id: UUID, **changes: Any) -> FarmState:
    if not any(v.id == vaccination_id for v in state.vaccinations):
        logger.warning("vaccination_not_found", extra={"vaccination_id": str(vaccination_id)})
        return state
    return replace(
        state,
        vaccinations=tuple(
            replace(v, **changes) if v.id == vaccination_id else v
            for v in state.vaccinations
        ),
    )


@traced_engine("health.vaccination_add", "1.0", fingerprint_fields=("vaccine_name",))
def add_vaccination(
    state: FarmState,
    *,
    flock_id: UUID,
    vaccine_name: str,
    scheduled_date: date,
    notes: str = "",
) -> FarmState:
    vaccination = Vaccination(
        id=uuid4(),
        flock_id=flock_id,
        vaccine_name=require_text(vaccine_name, "vaccine_name"),
        scheduled_date=scheduled_date,
        administered_date=None,
        status=VaccinationStatus.SCHEDULED,
        notes=notes or "",
    )
    return replace(state, vaccinations=state.vaccinations + (vaccination,))


@traced_engine("health.vaccination_update", "1.0")
def update_vaccination(state: FarmState, command: VaccinationCommand) -> FarmState:
    if isinstance(command, RescheduleVaccination):
        return _replace_vaccination(
            state, command.vaccination_id, scheduled_date=command.scheduled_date
        )
    if isinstance(command, UpdateVaccinationNotes):
        return _replace_vaccination(state, command.vaccination_id, notes=command.notes or "")
    raise TypeError(f"Unsupported vaccination command: {type(command).__name__}")


@traced_engine("health.vaccination_complete", "1.0")
def mark_vaccination_complete(
    state: FarmState, vaccination_id: UUID, *, today: date
) -> FarmState:
    return _replace_vaccination(
        state,
        vaccination_id,
        status=VaccinationStatus.COMPLETED,
        administered_date=today,
    )


# ---------------------------------------------------------------------------
# Disease records
# ---------------------------------------------------------------------------


@traced_engine(
    "health.disease_add", "1.0",
    fingerprint_fields=("disease_name", "affected_birds", "treatment_cost"),
)
def add_disease_record(
    state: FarmState,
    *,
    flock_id: UUID,
    disease_name: str,
    date_detected: date,
    affected_birds: Any,
    treatment: str = "",
    treatment_cost: Any = 0,
    now: datetime,
) -> FarmState:
    """Open a disease record; a treatment cost is debited immediately."""
    name = require_text(disease_name, "disease_name")
    affected = require_count(affected_birds, "affected_birds")
    cost = require_non_negative(treatment_cost, "treatment_cost")

    transaction_id = None
    if cost > 0:
        state, txn = post_transaction(
            state,
            transaction_date=date_detected,
            type=TransactionType.DEBIT,
            amount=cost,
            source=f"Treatment for {name}",
            linked_company=LinkedCompany.EXTERNAL,
            description=treatment or "",
            category=TransactionCategory.MEDICATION,
            now=now,
        )
        transaction_id = txn.id

    record = DiseaseRecord(
        id=uuid4(),
        flock_id=flock_id,
        disease_name=name,
        date_detected=date_detected,
        affected_birds=affected,
        treatment_cost=cost,
        treatment=treatment or "",
        status=DiseaseStatus.ACTIVE,
        transaction_id=transaction_id,
    )
    return replace(state, disease_records=state.disease_records + (record,))


@traced_engine("health.disease_resolve", "1.0")
def resolve_disease_record(state: FarmState, record_id: UUID) -> FarmState:
    """Move a record to resolved.  Only the status changes."""
    if not any(d.id == record_id for d in state.disease_records):
        logger.warning("disease_record_not_found", extra={"record_id": str(record_id)})
        return state
    return replace(
        state,
        disease_records=tuple(
            replace(d, status=DiseaseStatus.RESOLVED) if d.id == record_id else d
            for d in state.disease_records
        ),
    )
