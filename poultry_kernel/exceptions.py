"""
Typed Exception Hierarchy for the Poultry Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the state engine (a UI, a script, a test) must react differently
to "you tried to sell more Peti than you have" and "the disk is full".
Matching on message text is fragile, so:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, UI-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example - WRONG way to handle errors:
    try:
        state = record_egg_sale(state, ...)
    except Exception as e:
        if "available" in str(e):  # FRAGILE - message might change
            warn_user()

Example - RIGHT way (what this module enables):
    try:
        state = record_egg_sale(state, ...)
    except InsufficientStockError as e:
        warn_user(f"Only {e.available} {e.unit} available")

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from PoultryLedgerError:

    PoultryLedgerError (base)
    |
    +-- ValidationError
    |   +-- MissingFieldError
    |   +-- InvalidQuantityError
    |   +-- InvalidVocabularyError
    |
    +-- StockError
    |   +-- InsufficientStockError
    |   +-- FeedStockNotFoundError
    |
    +-- RecordError
    |   +-- LabourNotFoundError
    |
    +-- PersistenceError
        +-- StateNotSavedError
        +-- StateDocumentCorruptError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                    | When Raised
-------------|-------------------------|--------------------------------------------
Validation   | MISSING_FIELD           | Required text field empty or absent
             | INVALID_QUANTITY        | Negative/zero quantity, broken > total eggs
             | INVALID_VOCABULARY      | Category, company or status not recognised
-------------|-------------------------|--------------------------------------------
Stock        | INSUFFICIENT_STOCK      | Oversell of Peti, overconsumption of feed
             | FEED_STOCK_NOT_FOUND    | Consuming a feed type never purchased
-------------|-------------------------|--------------------------------------------
Record       | LABOUR_NOT_FOUND        | Paying a worker that is not registered
-------------|-------------------------|--------------------------------------------
Persistence  | STATE_NOT_SAVED         | Store write failed; prior state stays valid
             | STATE_DOCUMENT_CORRUPT  | Stored document cannot be decoded

===============================================================================
HANDLING PATTERNS
===============================================================================

1. STOCK ERRORS ARE USER ERRORS:

    except InsufficientStockError as e:
        show(f"Cannot use {e.requested} {e.unit}; only {e.available} available")

2. PERSISTENCE ERRORS KEEP THE PRIOR STATE:

    except StateNotSavedError:
        show("Changes not saved, please retry")
        # service.state is still the last confirmed snapshot

===============================================================================
"""


class PoultryLedgerError(Exception):
    """
    Base exception for all poultry kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "POULTRY_LEDGER_ERROR"


# Validation exceptions


class ValidationError(PoultryLedgerError):
    """Base exception for rejected domain events."""

    code: str = "VALIDATION_ERROR"


class MissingFieldError(ValidationError):
    """A required field was empty or absent."""

    code: str = "MISSING_FIELD"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Missing required field: {field}")


class InvalidQuantityError(ValidationError):
    """A quantity or amount is outside its allowed range."""

    code: str = "INVALID_QUANTITY"

    def __init__(self, field: str, value: object, reason: str):
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field}={value}: {reason}")


class InvalidVocabularyError(ValidationError):
    """A value is not part of its closed vocabulary."""

    code: str = "INVALID_VOCABULARY"

    def __init__(self, field: str, value: object, allowed: tuple[str, ...]):
        self.field = field
        self.value = value
        self.allowed = allowed
        super().__init__(
            f"Invalid {field} {value!r}; expected one of: {', '.join(allowed)}"
        )


# Stock exceptions


class StockError(PoultryLedgerError):
    """Base exception for inventory errors."""

    code: str = "STOCK_ERROR"


class InsufficientStockError(StockError):
    """More was requested than is held in inventory."""

    code: str = "INSUFFICIENT_STOCK"

    def __init__(self, item: str, requested: object, available: object, unit: str):
        self.item = item
        self.requested = requested
        self.available = available
        self.unit = unit
        super().__init__(
            f"Insufficient {item}: requested {requested} {unit}, "
            f"only {available} {unit} available"
        )


class FeedStockNotFoundError(StockError):
    """No stock record exists for the feed type."""

    code: str = "FEED_STOCK_NOT_FOUND"

    def __init__(self, feed_type: str):
        self.feed_type = feed_type
        super().__init__(f"No feed stock for feed type: {feed_type}")


# Record exceptions


class RecordError(PoultryLedgerError):
    """Base exception for record lookup errors."""

    code: str = "RECORD_ERROR"


class LabourNotFoundError(RecordError):
    """Worker with given ID was not found."""

    code: str = "LABOUR_NOT_FOUND"

    def __init__(self, labour_id: str):
        self.labour_id = labour_id
        super().__init__(f"Labour not found: {labour_id}")


# Persistence exceptions


class PersistenceError(PoultryLedgerError):
    """Base exception for state store errors."""

    code: str = "PERSISTENCE_ERROR"


class StateNotSavedError(PersistenceError):
    """
    The state document could not be written.

    The caller's last confirmed state remains authoritative.
    """

    code: str = "STATE_NOT_SAVED"

    def __init__(self, document: str, reason: str):
        self.document = document
        self.reason = reason
        super().__init__(f"Changes not saved, please retry ({document}: {reason})")


class StateDocumentCorruptError(PersistenceError):
    """The stored state document could not be decoded."""

    code: str = "STATE_DOCUMENT_CORRUPT"

    def __init__(self, document: str, reason: str):
        self.document = document
        self.reason = reason
        super().__init__(f"State document {document} is unreadable: {reason}")
