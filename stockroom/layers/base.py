"""Layer base classes.

A warehouse is stored as a tree of layer documents::

    warehouses/{id}/zones/{id}/bays/{id}/shelves/{id}/columns/{id}/trays/{id}

Every node keeps its current ``fields`` and a snapshot of the fields last read
from or written to the store; a node is dirty while the two differ. Children
are loaded lazily, and staging walks only the part of the tree that is resident.
"""
import asyncio
import copy
import enum
import logging
import time
import uuid
import weakref
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from stockroom.exceptions import InvalidStateError, NotFoundError, PartialLoadError, StoreError
from stockroom.services.document_store import DocumentStore, join_paths

logger = logging.getLogger(__name__)


class WarehouseLevel(enum.IntEnum):
    """The layers of the warehouse model, bottom first."""
    TRAY = 0
    COLUMN = 1
    SHELF = 2
    BAY = 3
    ZONE = 4
    WAREHOUSE = 5


def generate_id() -> str:
    return uuid.uuid4().hex[:20]


def now_millis() -> int:
    return int(time.time() * 1000)


class Unloaded:
    """Children are not resident; the node exists with its own fields only."""
    __slots__ = ()

    def __repr__(self):
        return "Unloaded"


UNLOADED = Unloaded()


@dataclass
class Loaded:
    """Children are resident, sorted by index."""
    children: List["Layer"] = field(default_factory=list)


class DatabaseObject:
    """A stored document with dirty tracking against its last persisted fields."""
    collection_name: str = ""

    def __init__(self, id: str, fields: Dict[str, Any], store: DocumentStore):
        self.id = id
        self.fields = fields
        self.persisted_fields: Optional[Dict[str, Any]] = None
        self.loaded = False
        self.store = store

    @property
    def collection_path(self) -> str:
        raise NotImplementedError

    @property
    def path(self) -> str:
        return join_paths(self.collection_path, self.id)

    async def load(self, force_load: bool = False):
        """Read this node's fields from the store unless they are already resident."""
        if self.loaded and not force_load:
            return self
        fields = await self.store.load_document(self.path)
        if fields is None:
            raise NotFoundError(self.path)
        self.fields = fields
        self.fields_saved()
        self.loaded = True
        logger.debug("Loaded %s", self.path)
        return self

    def is_dirty(self) -> bool:
        return self.persisted_fields is None or self.fields != self.persisted_fields

    def fields_saved(self) -> None:
        self.persisted_fields = copy.deepcopy(self.fields)

    def stage_fields(self, force_stage: bool = False) -> bool:
        """Queue a write of this node's fields if they changed. Returns True if queued."""
        if not (force_stage or self.is_dirty()):
            return False
        previous = self.persisted_fields
        previous_stamp = self.fields.get("last_modified")
        stamp = now_millis()
        self.fields["last_modified"] = stamp
        self.store.set(self.path, self.fields)
        self.fields_saved()

        def restore():
            self.persisted_fields = previous
            if self.fields.get("last_modified") == stamp:
                self.fields["last_modified"] = previous_stamp

        self.store.on_rollback(restore)
        return True


class Layer(DatabaseObject):
    """A node of the warehouse tree with a parent handle and a sibling index."""
    level: WarehouseLevel

    def __init__(self, id: str, fields: Dict[str, Any], store: DocumentStore, parent: Optional["ParentLayer"] = None):
        super().__init__(id, fields, store)
        self._parent_ref = weakref.ref(parent) if parent is not None else None
        self.deleted = False

    @classmethod
    def create_from_fields(cls, id: str, fields: Dict[str, Any], parent: "ParentLayer"):
        """Build a node from a stored document; it starts clean and flat."""
        layer = cls(id, fields, parent.store, parent)
        layer.fields_saved()
        layer.loaded = True
        return layer

    def __repr__(self):
        return f"{type(self).__name__}({self.id!r}, index={self.index})"

    @property
    def parent(self) -> Optional["ParentLayer"]:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def collection_path(self) -> str:
        parent = self.parent
        if parent is None:
            return self.collection_name
        return join_paths(parent.path, self.collection_name)

    @property
    def index(self) -> int:
        return self.fields.get("index", 0)

    @index.setter
    def index(self, index: int):
        self.fields["index"] = index

    @property
    def in_deleted_subtree(self) -> bool:
        """Whether this node or one of its resident ancestors has been deleted."""
        node = self
        while node is not None:
            if node.deleted:
                return True
            node = node.parent
        return False

    def ancestor(self, level: WarehouseLevel) -> Optional["Layer"]:
        """Walk up the parent handles to the node at ``level``."""
        node = self
        while node is not None and node.level < level:
            node = node.parent
        if node is not None and node.level == level:
            return node
        return None

    @property
    def parent_column(self):
        return self.ancestor(WarehouseLevel.COLUMN)

    @property
    def parent_shelf(self):
        return self.ancestor(WarehouseLevel.SHELF)

    @property
    def parent_bay(self):
        return self.ancestor(WarehouseLevel.BAY)

    @property
    def parent_zone(self):
        return self.ancestor(WarehouseLevel.ZONE)

    @property
    def parent_warehouse(self):
        return self.ancestor(WarehouseLevel.WAREHOUSE)

    # ------------------------------------------------------------------
    # Staging
    # ------------------------------------------------------------------

    def before_stage(self) -> None:
        """Recompute derived fields. Runs on every visited node before the dirty check."""

    def stage_layer(self, force_stage: bool, min_level: WarehouseLevel) -> int:
        if self.deleted:
            return 0
        self.before_stage()
        return int(self.stage_fields(force_stage))

    async def stage(
        self,
        force_stage: bool = False,
        commit: bool = False,
        min_level: WarehouseLevel = WarehouseLevel.TRAY,
    ) -> int:
        """
        Queue writes for this node and every resident descendant down to ``min_level``.

        Only dirty nodes are written unless ``force_stage`` is set. Descendants
        that were never loaded are not visited, and a deleted node is never
        written again. With ``commit`` the whole pending batch is flushed as one
        unit; a rejected batch raises ``StageConflictError`` and leaves the
        staged nodes dirty again.
        Returns the number of writes queued by this call.
        """
        written = 0 if self.in_deleted_subtree else self.stage_layer(force_stage, min_level)
        logger.debug("Staged %d writes under %s", written, self.path)
        if commit:
            await self.store.commit()
        return written

    def stage_soon(
        self,
        force_stage: bool = False,
        min_level: WarehouseLevel = WarehouseLevel.TRAY,
    ) -> asyncio.Task:
        """Stage and commit in the background; failures surface through the returned task."""
        task = asyncio.ensure_future(self.stage(force_stage, True, min_level))

        def report(done: asyncio.Task):
            if not done.cancelled() and done.exception() is not None:
                logger.error("Background commit of %s failed: %s", self.path, done.exception())

        task.add_done_callback(report)
        return task

    async def delete(self, commit: bool = False) -> None:
        """
        Remove this node and everything beneath it from storage.

        The node is detached from its resident parent and the surviving siblings
        are renumbered. Without ``commit`` the removal waits for the next commit.
        """
        parent = self.parent
        self.store.delete(self.path)
        self.deleted = True
        position = None
        if parent is not None and parent.is_deep_loaded:
            position = parent.remove_child(self)

        def restore():
            self.deleted = False
            if position is not None and parent is not None and parent.is_deep_loaded:
                parent.add_child(self, position)

        self.store.on_rollback(restore)

        if commit:
            if parent is not None:
                await parent.stage(commit=True, min_level=self.level)
            else:
                await self.store.commit()


class ParentLayer(Layer):
    """A layer that owns an ordered list of lazily loaded children."""
    child_class: type = None
    child_order_field = "index"

    def __init__(self, id: str, fields: Dict[str, Any], store: DocumentStore, parent: Optional["ParentLayer"] = None):
        super().__init__(id, fields, store, parent)
        self.load_state = UNLOADED

    @property
    def child_level(self) -> WarehouseLevel:
        return self.child_class.level

    @property
    def child_collection_path(self) -> str:
        return join_paths(self.path, self.child_class.collection_name)

    @property
    def is_deep_loaded(self) -> bool:
        return isinstance(self.load_state, Loaded)

    @property
    def children(self) -> List[Layer]:
        if not isinstance(self.load_state, Loaded):
            raise InvalidStateError(f"Children of {self.path} are not loaded")
        return self.load_state.children

    def mark_children_loaded(self) -> None:
        """Declare a freshly created node's (empty) child list authoritative."""
        if not self.is_deep_loaded:
            self.load_state = Loaded()

    async def load_children(self, flat: bool = False, min_level: WarehouseLevel = WarehouseLevel.TRAY) -> None:
        """
        Make the children resident, down to ``min_level``.

        Already resident children are kept; only subtrees that are still flat
        are fetched. With ``flat`` only this node's direct children are loaded.
        A subtree that fails to load stays flat and is reported through
        ``PartialLoadError`` once all its siblings have been tried.
        """
        if self.child_level < min_level:
            return

        if not self.is_deep_loaded:
            documents = await self.store.load_collection(self.child_collection_path, self.child_order_field)
            children = [self.child_class.create_from_fields(doc.id, doc.fields, self) for doc in documents]
            children.sort(key=lambda child: child.index)
            self.load_state = Loaded(children)
            logger.debug("Loaded %d children of %s", len(children), self.path)

        if flat:
            return

        failures = []
        for child in self.children:
            if not isinstance(child, ParentLayer):
                continue
            try:
                await child.load_children(False, min_level)
            except PartialLoadError as e:
                failures.extend(e.failures)
            except StoreError as e:
                failures.append((child.path, e))
        if failures:
            logger.warning("Partial load under %s: %d subtrees failed", self.path, len(failures))
            raise PartialLoadError(failures)

    def unload_children(self) -> None:
        """Drop the resident children so the next load fetches them again."""
        self.load_state = UNLOADED

    def renumber_children(self) -> None:
        for i, child in enumerate(self.children):
            if child.index != i:
                child.index = i

    def add_child(self, child: Layer, index: Optional[int] = None) -> None:
        children = self.children
        if index is None or index > len(children):
            index = len(children)
        children.insert(index, child)
        self.renumber_children()

    def remove_child(self, child: Layer) -> int:
        """Detach ``child`` and renumber the survivors. Returns its old position."""
        children = self.children
        position = children.index(child)
        del children[position]
        self.renumber_children()
        return position

    def descendants(self, level: WarehouseLevel) -> List[Layer]:
        """Every resident node at ``level`` beneath this one, in order."""
        if not self.is_deep_loaded:
            return []
        if level == self.child_level:
            return list(self.children)
        if level > self.child_level:
            return []
        return [node for child in self.children for node in child.descendants(level)]

    def find_descendant(self, id: str) -> Optional[Layer]:
        """Search the resident subtree for a node by id."""
        if not self.is_deep_loaded:
            return None
        for child in self.children:
            if child.id == id:
                return child
            if isinstance(child, ParentLayer):
                found = child.find_descendant(id)
                if found is not None:
                    return found
        return None

    def stage_layer(self, force_stage: bool, min_level: WarehouseLevel) -> int:
        if self.deleted:
            return 0
        written = super().stage_layer(force_stage, min_level)
        if self.is_deep_loaded and self.child_level >= min_level:
            self.renumber_children()
            for child in self.children:
                written += child.stage_layer(force_stage, min_level)
        return written


class TopLayer(ParentLayer):
    """The root of a tree: no parent, stored in a top level collection."""


class MiddleLayer(ParentLayer):
    """A layer with both a parent and children."""

    @classmethod
    def create_child_of(cls, parent: ParentLayer, fields: Dict[str, Any], index: Optional[int] = None):
        layer = cls(generate_id(), fields, parent.store, parent)
        layer.loaded = True
        layer.mark_children_loaded()
        parent.add_child(layer, index)
        return layer


class BottomLayer(Layer):
    """A leaf layer."""

    @classmethod
    def create_child_of(cls, parent: ParentLayer, fields: Dict[str, Any], index: Optional[int] = None):
        layer = cls(generate_id(), fields, parent.store, parent)
        layer.loaded = True
        parent.add_child(layer, index)
        return layer

    def descendants(self, level: WarehouseLevel) -> List[Layer]:
        return []
