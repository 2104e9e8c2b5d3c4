"""
StateStore -- whole-document persistence for the farm state.

Responsibility:
    Read the last committed FarmState and replace it with a new one.  The
    store is document-shaped: every write replaces the entire snapshot.

Architecture position:
    Kernel > Services -- imperative shell.  The engines never see a store;
    FarmService calls ``get`` once and ``put`` after every engine call.

Invariants enforced:
    - ``put`` is all-or-nothing.  A failed write leaves the previous
      document in place and raises StateNotSavedError.
    - ``revision`` grows by one with every successful ``put``.

Failure modes:
    - StateNotSavedError when the backing database rejects the write.
    - StateDocumentCorruptError when the stored body cannot be decoded.
    - PersistenceError when the backing database cannot be read.
"""

from __future__ import annotations

import copy
from datetime import datetime
from typing import Any, Protocol

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from poultry_kernel.db.engine import session_scope
from poultry_kernel.domain.clock import Clock, SystemClock
from poultry_kernel.domain.codec import decode_state, encode_state
from poultry_kernel.domain.records import FarmState
from poultry_kernel.exceptions import PersistenceError, StateNotSavedError
from poultry_kernel.logging_config import get_logger
from poultry_kernel.models.state_document import StateDocument

logger = get_logger("services.state_store")


class StateStore(Protocol):
    """Anything that can hand back and accept a whole FarmState."""

    document_name: str

    def get(self, default: FarmState) -> FarmState:
        ...

    def put(self, state: FarmState) -> None:
        ...


class InMemoryStateStore:
    """
    Keeps the encoded document in a dict.

    Documents go through the codec on the way in and out, so tests exercise
    the same serialization as the SQL store.
    """

    def __init__(self, document_name: str = "farm"):
        self.document_name = document_name
        self._body: dict[str, Any] | None = None
        self.revision = 0

    def get(self, default: FarmState) -> FarmState:
        if self._body is None:
            return default
        return decode_state(copy.deepcopy(self._body), self.document_name)

    def put(self, state: FarmState) -> None:
        self._body = encode_state(state)
        self.revision += 1


class SqlStateStore:
    """
    One row per named document in ``farm_state_documents``.

    Contract:
        ``put`` runs inside ``session_scope`` so the row update commits or
        rolls back as a unit.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        document_name: str = "farm",
        clock: Clock | None = None,
    ):
        self._session_factory = session_factory
        self.document_name = document_name
        self._clock = clock or SystemClock()

    def _load_row(self, session: Session) -> StateDocument | None:
        return session.execute(
            select(StateDocument).where(StateDocument.name == self.document_name)
        ).scalar_one_or_none()

    @property
    def revision(self) -> int:
        """Revision of the stored document, 0 when nothing is stored."""
        with session_scope(self._session_factory) as session:
            row = self._load_row(session)
            return row.revision if row is not None else 0

    def get(self, default: FarmState) -> FarmState:
        try:
            with session_scope(self._session_factory) as session:
                row = self._load_row(session)
                body = copy.deepcopy(row.body) if row is not None else None
        except SQLAlchemyError as exc:
            logger.error(
                "state_read_failed",
                extra={"document": self.document_name, "error": str(exc)},
            )
            raise PersistenceError(
                f"Could not read state document {self.document_name}: {exc}"
            ) from exc

        if body is None:
            logger.info("state_document_missing", extra={"document": self.document_name})
            return default
        return decode_state(body, self.document_name)

    def put(self, state: FarmState) -> None:
        body = encode_state(state)
        now: datetime = self._clock.now()
        try:
            with session_scope(self._session_factory) as session:
                row = self._load_row(session)
                if row is None:
                    row = StateDocument(
                        name=self.document_name,
                        body=body,
                        revision=1,
                        updated_at=now,
                    )
                    session.add(row)
                else:
                    row.body = body
                    row.revision = row.revision + 1
                    row.updated_at = now
                revision = row.revision
        except SQLAlchemyError as exc:
            raise StateNotSavedError(self.document_name, str(exc)) from exc

        logger.debug(
            "state_document_written",
            extra={"document": self.document_name, "revision": revision},
        )
