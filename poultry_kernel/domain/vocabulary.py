"""
Vocabulary -- closed value sets and fixed domain constants.

Responsibility:
    Defines every closed vocabulary of the farm ledger as a ``str`` Enum so
    that stored documents and exported files keep the exact wire strings,
    plus the two load-bearing unit constants.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Imported by records, engines,
    codec and reports.

Invariants enforced:
    - 1 Peti is exactly 360 eggs.
    - 1 feed bag is exactly 50 kg.
    - Enum values are the wire strings; they must never be renamed.
"""

from __future__ import annotations

from enum import Enum

from poultry_kernel.exceptions import InvalidVocabularyError

EGGS_PER_PETI = 360
BAG_SIZE_KG = 50


class TransactionType(str, Enum):
    CREDIT = "credit"
    DEBIT = "debit"


class TransactionCategory(str, Enum):
    FEED_PURCHASE = "feed_purchase"
    EGG_SALE = "egg_sale"
    MEDICATION = "medication"
    LABOR = "labor"
    UTILITIES = "utilities"
    OTHER = "other"
    INITIAL_BALANCE = "initial_balance"
    BIRD_PURCHASE = "bird_purchase"
    LABOUR_PAYMENT = "labour_payment"


class LinkedCompany(str, Enum):
    """External parties the farm transacts with; none is an owned resource."""

    CHAIRMAN_FEED = "Chairman Feed"
    CHAIRMAN_HATCHERY = "Chairman Hatchery"
    CHAIRMAN_GROUP = "Chairman Group"
    EXTERNAL = "External"


# Roles the fixed partners play in the ledger
FINANCIER = LinkedCompany.CHAIRMAN_GROUP
FEED_SUPPLIER = LinkedCompany.CHAIRMAN_FEED
CHICK_SUPPLIER = LinkedCompany.CHAIRMAN_HATCHERY


class VaccinationStatus(str, Enum):
    """
    Vaccination lifecycle.

    ``overdue`` is never written by the engine; it is derived at read time
    for scheduled vaccinations whose date has passed.
    """

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    OVERDUE = "overdue"


class DiseaseStatus(str, Enum):
    ACTIVE = "active"
    RESOLVED = "resolved"


class WageType(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"


class LabourStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class UnderflowPolicy(str, Enum):
    """How stock underflow (oversell, overconsumption) is handled."""

    REJECT = "reject"
    CLAMP = "clamp"


def parse_vocabulary(enum_cls: type[Enum], value: object, field: str):
    """
    Coerce a raw value into a member of ``enum_cls``.

    Raises:
        InvalidVocabularyError: if the value is not a member.
    """
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        allowed = tuple(member.value for member in enum_cls)
        raise InvalidVocabularyError(field, value, allowed) from None
