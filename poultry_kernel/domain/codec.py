"""
Codec -- FarmState <-> JSON-compatible state document.

Responsibility:
    Converts the immutable FarmState into the camelCase document shape the
    farm application has always stored (``bankAccount``, ``eggInventory``,
    ``feedStocks`` as a list, ...) and back.

Architecture position:
    Kernel > Domain -- pure, zero I/O.  Used by the state stores.

Invariants enforced:
    - Decimals are written as strings (no float round-trip); numbers and
      strings are both accepted on read.
    - ``feedStocks`` is a list on the wire and a feed-type keyed dict in
      memory; the first record for a feed type wins on read.
    - Collections missing from older documents decode as empty.

Failure modes:
    - StateDocumentCorruptError for missing required keys, unparsable
      dates/decimals/UUIDs, or out-of-vocabulary values.
"""

from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from poultry_kernel.domain.records import (
    BankAccount,
    DiseaseRecord,
    EggInventory,
    EggPrice,
    EggProduction,
    EggSale,
    FarmState,
    FeedConsumption,
    FeedPurchase,
    FeedStock,
    Flock,
    Labour,
    LabourPayment,
    Transaction,
    Vaccination,
)
from poultry_kernel.domain.vocabulary import (
    BAG_SIZE_KG,
    DiseaseStatus,
    LabourStatus,
    LinkedCompany,
    TransactionCategory,
    TransactionType,
    VaccinationStatus,
    WageType,
)
from poultry_kernel.exceptions import StateDocumentCorruptError

SCHEMA_VERSION = 1


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def _dec(value: Any) -> Decimal:
    if isinstance(value, float):
        return Decimal(str(value))
    return Decimal(value)


def _num(value: Decimal) -> str:
    return str(value)


def _day(value: str) -> date:
    # Older documents stored full ISO timestamps for some record dates
    return date.fromisoformat(value.split("T")[0])


def _opt_day(value: str | None) -> date | None:
    return _day(value) if value else None


def _uuid(value: Any) -> UUID:
    return UUID(str(value))


def _opt_uuid(value: Any) -> UUID | None:
    return _uuid(value) if value else None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def encode_state(state: FarmState) -> dict[str, Any]:
    """Serialize a FarmState into a JSON-compatible document."""
    bank = state.bank_account
    inv = state.egg_inventory
    return {
        "schemaVersion": SCHEMA_VERSION,
        "bankAccount": {
            "balance": _num(bank.balance),
            "borrowedAmount": _num(bank.borrowed_amount),
            "lastUpdated": bank.last_updated.isoformat(),
        },
        "transactions": [
            {
                "id": str(t.id),
                "date": t.transaction_date.isoformat(),
                "type": t.type.value,
                "amount": _num(t.amount),
                "source": t.source,
                "linkedCompany": t.linked_company.value,
                "description": t.description,
                "category": t.category.value,
            }
            for t in state.transactions
        ],
        "flocks": [
            {
                "id": str(f.id),
                "breed": f.breed,
                "numberOfLayers": f.number_of_layers,
                "ageWeeks": f.age_weeks,
                "startDate": f.start_date.isoformat(),
                "mortality": f.mortality,
                "isActive": f.is_active,
            }
            for f in state.flocks
        ],
        "eggProductions": [
            {
                "id": str(p.id),
                "date": p.production_date.isoformat(),
                "flockId": str(p.flock_id),
                "totalEggs": p.total_eggs,
                "brokenEggs": p.broken_eggs,
                "goodEggs": p.good_eggs,
                "petiCount": p.peti_count,
                "remainingEggs": p.remaining_eggs,
            }
            for p in state.egg_productions
        ],
        "eggSales": [
            {
                "id": str(s.id),
                "date": s.sale_date.isoformat(),
                "petiCount": s.peti_count,
                "pricePerPeti": _num(s.price_per_peti),
                "totalAmount": _num(s.total_amount),
                "buyerName": s.buyer_name,
                "transactionId": str(s.transaction_id) if s.transaction_id else None,
            }
            for s in state.egg_sales
        ],
        "eggInventory": {
            "totalEggs": inv.total_eggs,
            "totalPeti": inv.total_peti,
            "remainingEggs": inv.remaining_eggs,
            "lastUpdated": inv.last_updated.isoformat(),
        },
        "feedStocks": [
            {
                "id": str(fs.id),
                "feedType": fs.feed_type,
                "bagsInStock": _num(fs.bags_in_stock),
                "bagSize": fs.bag_size,
                "costPerBag": _num(fs.cost_per_bag),
                "lastPurchaseDate": fs.last_purchase_date.isoformat(),
            }
            for fs in state.feed_stocks.values()
        ],
        "feedPurchases": [
            {
                "id": str(fp.id),
                "date": fp.purchase_date.isoformat(),
                "feedType": fp.feed_type,
                "bags": _num(fp.bags),
                "costPerBag": _num(fp.cost_per_bag),
                "totalCost": _num(fp.total_cost),
                "transactionId": str(fp.transaction_id) if fp.transaction_id else None,
            }
            for fp in state.feed_purchases
        ],
        "feedConsumptions": [
            {
                "id": str(fc.id),
                "date": fc.consumption_date.isoformat(),
                "feedType": fc.feed_type,
                "bagsUsed": _num(fc.bags_used),
                "flockId": str(fc.flock_id),
            }
            for fc in state.feed_consumptions
        ],
        "vaccinations": [
            {
                "id": str(v.id),
                "flockId": str(v.flock_id),
                "vaccineName": v.vaccine_name,
                "scheduledDate": v.scheduled_date.isoformat(),
                "administeredDate": (
                    v.administered_date.isoformat() if v.administered_date else None
                ),
                "status": v.status.value,
                "notes": v.notes,
            }
            for v in state.vaccinations
        ],
        "diseaseRecords": [
            {
                "id": str(d.id),
                "flockId": str(d.flock_id),
                "diseaseName": d.disease_name,
                "dateDetected": d.date_detected.isoformat(),
                "affectedBirds": d.affected_birds,
                "treatmentCost": _num(d.treatment_cost),
                "treatment": d.treatment,
                "status": d.status.value,
                "transactionId": str(d.transaction_id) if d.transaction_id else None,
            }
            for d in state.disease_records
        ],
        "eggPrice": {
            "pricePerPeti": _num(state.egg_price.price_per_peti),
            "lastUpdated": state.egg_price.last_updated.isoformat(),
        },
        "labourList": [
            {
                "id": str(w.id),
                "name": w.name,
                "role": w.role,
                "wageType": w.wage_type.value,
                "wageAmount": _num(w.wage_amount),
                "joiningDate": w.joining_date.isoformat(),
                "phone": w.phone,
                "status": w.status.value,
            }
            for w in state.labour_list
        ],
        "labourPayments": [
            {
                "id": str(lp.id),
                "labourId": str(lp.labour_id),
                "date": lp.payment_date.isoformat(),
                "amount": _num(lp.amount),
                "notes": lp.notes,
                "transactionId": str(lp.transaction_id),
            }
            for lp in state.labour_payments
        ],
    }


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


def _decode_feed_stocks(items: list[dict[str, Any]]) -> dict[str, FeedStock]:
    stocks: dict[str, FeedStock] = {}
    for fs in items:
        # First entry per feed type wins
        if fs["feedType"] in stocks:
            continue
        stocks[fs["feedType"]] = FeedStock(
            id=_uuid(fs["id"]),
            feed_type=fs["feedType"],
            bags_in_stock=_dec(fs["bagsInStock"]),
            bag_size=int(fs.get("bagSize", BAG_SIZE_KG)),
            cost_per_bag=_dec(fs["costPerBag"]),
            last_purchase_date=_day(fs["lastPurchaseDate"]),
        )
    return stocks


def _decode(doc: dict[str, Any]) -> FarmState:
    bank = doc["bankAccount"]
    inv = doc["eggInventory"]
    price = doc["eggPrice"]
    return FarmState(
        bank_account=BankAccount(
            balance=_dec(bank["balance"]),
            borrowed_amount=_dec(bank["borrowedAmount"]),
            last_updated=datetime.fromisoformat(bank["lastUpdated"]),
        ),
        egg_inventory=EggInventory(
            total_eggs=int(inv["totalEggs"]),
            total_peti=int(inv["totalPeti"]),
            remaining_eggs=int(inv["remainingEggs"]),
            last_updated=datetime.fromisoformat(inv["lastUpdated"]),
        ),
        egg_price=EggPrice(
            price_per_peti=_dec(price["pricePerPeti"]),
            last_updated=datetime.fromisoformat(price["lastUpdated"]),
        ),
        transactions=tuple(
            Transaction(
                id=_uuid(t["id"]),
                transaction_date=_day(t["date"]),
                type=TransactionType(t["type"]),
                amount=_dec(t["amount"]),
                source=t.get("source", ""),
                linked_company=LinkedCompany(t["linkedCompany"]),
                description=t.get("description", ""),
                category=TransactionCategory(t["category"]),
            )
            for t in doc.get("transactions", [])
        ),
        flocks=tuple(
            Flock(
                id=_uuid(f["id"]),
                breed=f["breed"],
                number_of_layers=int(f["numberOfLayers"]),
                age_weeks=int(f.get("ageWeeks", 0)),
                start_date=_day(f["startDate"]),
                mortality=int(f.get("mortality", 0)),
                is_active=bool(f.get("isActive", True)),
            )
            for f in doc.get("flocks", [])
        ),
        egg_productions=tuple(
            EggProduction(
                id=_uuid(p["id"]),
                production_date=_day(p["date"]),
                flock_id=_uuid(p["flockId"]),
                total_eggs=int(p["totalEggs"]),
                broken_eggs=int(p.get("brokenEggs", 0)),
                good_eggs=int(p["goodEggs"]),
                peti_count=int(p["petiCount"]),
                remaining_eggs=int(p["remainingEggs"]),
            )
            for p in doc.get("eggProductions", [])
        ),
        egg_sales=tuple(
            EggSale(
                id=_uuid(s["id"]),
                sale_date=_day(s["date"]),
                peti_count=int(s["petiCount"]),
                price_per_peti=_dec(s["pricePerPeti"]),
                total_amount=_dec(s["totalAmount"]),
                buyer_name=s["buyerName"],
                transaction_id=_opt_uuid(s.get("transactionId")),
            )
            for s in doc.get("eggSales", [])
        ),
        feed_stocks=_decode_feed_stocks(doc.get("feedStocks", [])),
        feed_purchases=tuple(
            FeedPurchase(
                id=_uuid(fp["id"]),
                purchase_date=_day(fp["date"]),
                feed_type=fp["feedType"],
                bags=_dec(fp["bags"]),
                cost_per_bag=_dec(fp["costPerBag"]),
                total_cost=_dec(fp["totalCost"]),
                transaction_id=_opt_uuid(fp.get("transactionId")),
            )
            for fp in doc.get("feedPurchases", [])
        ),
        feed_consumptions=tuple(
            FeedConsumption(
                id=_uuid(fc["id"]),
                consumption_date=_day(fc["date"]),
                feed_type=fc["feedType"],
                bags_used=_dec(fc["bagsUsed"]),
                flock_id=_uuid(fc["flockId"]),
            )
            for fc in doc.get("feedConsumptions", [])
        ),
        vaccinations=tuple(
            Vaccination(
                id=_uuid(v["id"]),
                flock_id=_uuid(v["flockId"]),
                vaccine_name=v["vaccineName"],
                scheduled_date=_day(v["scheduledDate"]),
                administered_date=_opt_day(v.get("administeredDate")),
                status=VaccinationStatus(v["status"]),
                notes=v.get("notes", ""),
            )
            for v in doc.get("vaccinations", [])
        ),
        disease_records=tuple(
            DiseaseRecord(
                id=_uuid(d["id"]),
                flock_id=_uuid(d["flockId"]),
                disease_name=d["diseaseName"],
                date_detected=_day(d["dateDetected"]),
                affected_birds=int(d["affectedBirds"]),
                treatment_cost=_dec(d.get("treatmentCost", 0)),
                treatment=d.get("treatment", ""),
                status=DiseaseStatus(d["status"]),
                transaction_id=_opt_uuid(d.get("transactionId")),
            )
            for d in doc.get("diseaseRecords", [])
        ),
        labour_list=tuple(
            Labour(
                id=_uuid(w["id"]),
                name=w["name"],
                role=w.get("role", ""),
                wage_type=WageType(w["wageType"]),
                wage_amount=_dec(w["wageAmount"]),
                joining_date=_day(w["joiningDate"]),
                phone=w.get("phone", ""),
                status=LabourStatus(w.get("status", LabourStatus.ACTIVE.value)),
            )
            for w in doc.get("labourList", [])
        ),
        labour_payments=tuple(
            LabourPayment(
                id=_uuid(lp["id"]),
                labour_id=_uuid(lp["labourId"]),
                payment_date=_day(lp["date"]),
                amount=_dec(lp["amount"]),
                notes=lp.get("notes", ""),
                transaction_id=_uuid(lp["transactionId"]),
            )
            for lp in doc.get("labourPayments", [])
        ),
    )


def decode_state(doc: dict[str, Any], document: str = "state") -> FarmState:
    """
    Rebuild a FarmState from a stored document.

    Raises:
        StateDocumentCorruptError: if the document cannot be decoded.
    """
    if not isinstance(doc, dict):
        raise StateDocumentCorruptError(document, f"expected an object, got {type(doc).__name__}")
    version = doc.get("schemaVersion", SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        raise StateDocumentCorruptError(document, f"unsupported schemaVersion {version}")
    try:
        return _decode(doc)
    except KeyError as exc:
        raise StateDocumentCorruptError(document, f"missing key {exc}") from exc
    except (ValueError, TypeError, InvalidOperation, AttributeError) as exc:
        raise StateDocumentCorruptError(document, str(exc) or type(exc).__name__) from exc
