"""Document store - the persistence boundary of the warehouse model.

Writes are buffered into a pending batch with ``set``/``delete`` and flushed
atomically by ``commit``. Loads are served immediately.
"""
import copy
import enum
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from stockroom.exceptions import StageConflictError, StoreError
from stockroom.models.document import Document

logger = logging.getLogger(__name__)


def join_paths(*segments: str) -> str:
    """Join path segments with single slashes, skipping empty ones."""
    return "/".join(segment.strip("/") for segment in segments if segment)


def split_path(path: str):
    """Split a document path into its collection path and document id."""
    collection_path, _, document_id = path.rpartition("/")
    return collection_path, document_id


@dataclass
class StoredDocument:
    """A document as returned by a collection load."""
    id: str
    fields: Dict[str, Any]


class OperationType(str, enum.Enum):
    SET = "set"
    DELETE = "delete"


@dataclass
class BatchOperation:
    type: OperationType
    path: str
    fields: Optional[Dict[str, Any]] = None


@dataclass
class PendingBatch:
    """Writes and the undo actions that revert local state if the batch fails."""
    operations: List[BatchOperation] = field(default_factory=list)
    rollbacks: List[Callable[[], None]] = field(default_factory=list)


class DocumentStore:
    """Abstract document store with an implicit pending write batch."""

    def __init__(self):
        self._batch = PendingBatch()

    async def load_document(self, path: str) -> Optional[Dict[str, Any]]:
        """Return the fields stored at ``path``, or None if there is no document."""
        raise NotImplementedError

    async def load_collection(self, path: str, order_by: Optional[str] = None) -> List[StoredDocument]:
        """Return every document in the collection at ``path``, sorted by ``order_by``."""
        raise NotImplementedError

    async def _apply(self, operations: List[BatchOperation]) -> None:
        """Apply all operations as one unit or raise ``StageConflictError``."""
        raise NotImplementedError

    @property
    def pending_count(self) -> int:
        return len(self._batch.operations)

    def set(self, path: str, fields: Dict[str, Any]) -> None:
        self._batch.operations.append(
            BatchOperation(OperationType.SET, path, copy.deepcopy(fields))
        )

    def delete(self, path: str) -> None:
        self._batch.operations.append(BatchOperation(OperationType.DELETE, path))

    def on_rollback(self, callback: Callable[[], None]) -> None:
        """Register an undo action to run if the pending batch fails to commit."""
        self._batch.rollbacks.append(callback)

    async def commit(self) -> None:
        """
        Flush the pending batch atomically.

        The batch is detached before any I/O so writes staged while the commit is
        in flight go into the next batch. On failure the batch's undo actions run
        in reverse order and the error propagates to the caller.
        """
        batch, self._batch = self._batch, PendingBatch()
        if not batch.operations:
            return
        try:
            await self._apply(batch.operations)
        except StageConflictError:
            logger.warning("Commit of %d operations failed, rolling back local state", len(batch.operations))
            for rollback in reversed(batch.rollbacks):
                rollback()
            raise
        logger.debug("Committed %d operations", len(batch.operations))


class SqlDocumentStore(DocumentStore):
    """Document store backed by the ``documents`` table."""

    def __init__(self, session_factory):
        super().__init__()
        self._session_factory = session_factory

    async def load_document(self, path: str) -> Optional[Dict[str, Any]]:
        try:
            with self._session_factory() as db:
                document = db.get(Document, path)
                if document is None:
                    return None
                return copy.deepcopy(document.fields)
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load {path}: {e}") from e

    async def load_collection(self, path: str, order_by: Optional[str] = None) -> List[StoredDocument]:
        try:
            with self._session_factory() as db:
                rows = db.query(Document).filter(Document.collection_path == path).all()
                documents = [
                    StoredDocument(id=row.document_id, fields=copy.deepcopy(row.fields))
                    for row in rows
                ]
        except SQLAlchemyError as e:
            raise StoreError(f"Failed to load collection {path}: {e}") from e

        if order_by:
            # Documents missing the sort field go last
            documents.sort(key=lambda doc: (doc.fields.get(order_by) is None, doc.fields.get(order_by)))
        return documents

    async def _apply(self, operations: List[BatchOperation]) -> None:
        with self._session_factory() as db:
            try:
                for operation in operations:
                    if operation.type == OperationType.SET:
                        collection_path, document_id = split_path(operation.path)
                        db.merge(Document(
                            path=operation.path,
                            collection_path=collection_path,
                            document_id=document_id,
                            fields=operation.fields,
                        ))
                    else:
                        # A deleted node takes its whole subtree with it
                        db.query(Document).filter(
                            or_(
                                Document.path == operation.path,
                                Document.path.startswith(f"{operation.path}/", autoescape=True),
                            )
                        ).delete(synchronize_session=False)
                    db.flush()
                db.commit()
            except SQLAlchemyError as e:
                db.rollback()
                raise StageConflictError(f"Commit rejected: {e}") from e
