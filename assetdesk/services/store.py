"""
Entity store — the persistence collaborator used by the lifecycle engine.

The assignment engine and the referential guard only ever talk to an
``EntityStore``: three repositories (employees, assets, assignments),
each offering ``list``, ``get``, ``create``, ``update``, ``update_if``
(a compare-and-set update) and ``delete``, plus a ``transaction()``
context manager that makes a multi-step change all-or-nothing.

Two implementations are provided:

  - ``SqlStore`` wraps a SQLAlchemy session.  ``transaction()`` commits
    on success and rolls back on any exception.
  - ``MemoryStore`` keeps entities in dicts.  ``transaction()`` keeps an
    undo log of every create/update/delete and replays it in reverse on
    failure.

Both raise ``NotFound`` from ``update``/``delete`` for unknown ids and
``StoreError`` for any underlying fault.
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError

from assetdesk.errors import NotFound, StoreError
from assetdesk.models.asset import Asset, Assignment
from assetdesk.models.employee import Employee

logger = logging.getLogger(__name__)


class Repository:
    """Interface for one entity collection."""

    entity_name: str = "entity"

    def list(self) -> list:
        raise NotImplementedError

    def get(self, entity_id: str):
        """Return the entity with ``entity_id``, or None."""
        raise NotImplementedError

    def create(self, entity):
        raise NotImplementedError

    def update(self, entity_id: str, fields: dict[str, Any]):
        """Apply ``fields`` to the entity and return it; NotFound if missing."""
        raise NotImplementedError

    def update_if(self, entity_id: str, expected: dict[str, Any], fields: dict[str, Any]):
        """
        Apply ``fields`` only while the stored entity still matches
        ``expected``, checked and written as one step.

        Returns the updated entity, or None when nothing matched.
        """
        raise NotImplementedError

    def delete(self, entity_id: str) -> None:
        raise NotImplementedError


class EntityStore:
    """A bundle of the three repositories plus a transaction boundary."""

    employees: Repository
    assets: Repository
    assignments: Repository

    def transaction(self):
        raise NotImplementedError


# =========================================================================
# SQLAlchemy-backed store
# =========================================================================


@contextmanager
def _store_errors(action: str):
    """Translate SQLAlchemy failures into ``StoreError``."""
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("Store call failed while trying to %s: %s", action, exc)
        raise StoreError(f"Could not {action}.") from exc


def commit(session, action: str) -> None:
    """
    Commit ``session``; on failure roll back and raise ``StoreError``.

    Used by the plain CRUD services, which write outside an engine
    transaction.
    """
    try:
        session.commit()
    except SQLAlchemyError as exc:
        session.rollback()
        logger.error("Commit failed while trying to %s: %s", action, exc)
        raise StoreError(f"Could not {action}.") from exc


class SqlRepository(Repository):
    """Repository over one model class, bound to a session."""

    def __init__(self, session, model, entity_name: str):
        self.session = session
        self.model = model
        self.entity_name = entity_name

    def list(self) -> list:
        with _store_errors(f"list {self.entity_name}s"):
            return list(self.session.scalars(select(self.model)).all())

    def get(self, entity_id: str):
        with _store_errors(f"load {self.entity_name} {entity_id}"):
            return self.session.get(self.model, entity_id)

    def create(self, entity):
        # Flush so constraint failures surface inside the transaction.
        with _store_errors(f"create {self.entity_name}"):
            self.session.add(entity)
            self.session.flush()
        return entity

    def update(self, entity_id: str, fields: dict[str, Any]):
        entity = self.get(entity_id)
        if entity is None:
            raise NotFound(self.entity_name, entity_id)
        with _store_errors(f"update {self.entity_name} {entity_id}"):
            for key, value in fields.items():
                setattr(entity, key, value)
            self.session.flush()
        return entity

    def update_if(self, entity_id: str, expected: dict[str, Any], fields: dict[str, Any]):
        # Check and write in one UPDATE ... WHERE statement.
        criteria = [getattr(self.model, key) == value for key, value in expected.items()]
        with _store_errors(f"update {self.entity_name} {entity_id}"):
            result = self.session.execute(
                update(self.model)
                .where(self.model.id == entity_id, *criteria)
                .values(**fields)
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                return None
            return self.session.get(self.model, entity_id, populate_existing=True)

    def delete(self, entity_id: str) -> None:
        entity = self.get(entity_id)
        if entity is None:
            raise NotFound(self.entity_name, entity_id)
        with _store_errors(f"delete {self.entity_name} {entity_id}"):
            self.session.delete(entity)
            self.session.flush()


class SqlStore(EntityStore):
    """
    Entity store bound to a SQLAlchemy session.

    Usage::

        store = SqlStore(db.session)
        with store.transaction():
            store.assets.update(asset_id, {"status": "Repair"})
    """

    def __init__(self, session):
        self.session = session
        self.employees = SqlRepository(session, Employee, "employee")
        self.assets = SqlRepository(session, Asset, "asset")
        self.assignments = SqlRepository(session, Assignment, "assignment")

    @contextmanager
    def transaction(self):
        """Commit everything done inside the block, or roll it all back."""
        try:
            yield self
            self.session.commit()
        except SQLAlchemyError as exc:
            self.session.rollback()
            logger.error("Transaction rolled back: %s", exc)
            raise StoreError("The change could not be saved.") from exc
        except Exception:
            self.session.rollback()
            raise


# =========================================================================
# In-memory store
# =========================================================================


class MemoryRepository(Repository):
    """Dict-backed repository that journals changes to its store."""

    def __init__(self, store: "MemoryStore", entity_name: str):
        self._store = store
        self._items: dict[str, Any] = {}
        self.entity_name = entity_name

    def list(self) -> list:
        return list(self._items.values())

    def get(self, entity_id: str):
        return self._items.get(entity_id)

    def create(self, entity):
        if entity.id in self._items:
            raise StoreError(f"Duplicate {self.entity_name} id {entity.id}.")
        self._items[entity.id] = entity
        self._store._record(lambda: self._items.pop(entity.id, None))
        return entity

    def update(self, entity_id: str, fields: dict[str, Any]):
        entity = self._items.get(entity_id)
        if entity is None:
            raise NotFound(self.entity_name, entity_id)
        previous = {key: getattr(entity, key) for key in fields}
        for key, value in fields.items():
            setattr(entity, key, value)

        def undo():
            for key, value in previous.items():
                setattr(entity, key, value)

        self._store._record(undo)
        return entity

    def update_if(self, entity_id: str, expected: dict[str, Any], fields: dict[str, Any]):
        entity = self._items.get(entity_id)
        if entity is None or any(
            getattr(entity, key) != value for key, value in expected.items()
        ):
            return None
        return self.update(entity_id, fields)

    def delete(self, entity_id: str) -> None:
        entity = self._items.pop(entity_id, None)
        if entity is None:
            raise NotFound(self.entity_name, entity_id)
        self._store._record(lambda: self._items.__setitem__(entity_id, entity))


class MemoryStore(EntityStore):
    """
    Pure in-memory entity store.

    Holds model instances that are never attached to a session, so it
    works without an application context.  Changes made outside a
    ``transaction()`` block are applied immediately and are not
    journaled.
    """

    def __init__(self):
        self._undo_log: list[Callable[[], None]] | None = None
        self.employees = MemoryRepository(self, "employee")
        self.assets = MemoryRepository(self, "asset")
        self.assignments = MemoryRepository(self, "assignment")

    def _record(self, undo: Callable[[], None]) -> None:
        if self._undo_log is not None:
            self._undo_log.append(undo)

    @contextmanager
    def transaction(self):
        """
        Journal changes made in the block; undo them if it raises.

        Nested blocks join the outermost transaction.
        """
        if self._undo_log is not None:
            yield self
            return

        self._undo_log = []
        try:
            yield self
        except Exception:
            for undo in reversed(self._undo_log):
                undo()
            logger.warning(
                "In-memory transaction rolled back (%d change(s) undone)",
                len(self._undo_log),
            )
            raise
        finally:
            self._undo_log = None
