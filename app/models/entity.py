"""
app/models/entity.py

Purpose: Entity kinds and the document-model capability set

- EntityKind describes a document kind (name, collection, natural ID scheme)
- DocumentModel is the set of store operations the generic service relies on
- MongoDocumentModel implements DocumentModel over a Motor collection
"""

from typing import Any, Callable, Dict, List, Mapping, Optional, Protocol, Sequence, Tuple

from motor.motor_asyncio import AsyncIOMotorCollection
from pymongo import ReturnDocument

Document = Dict[str, Any]
SortSpec = Sequence[Tuple[str, int]]

ID_DIGITS = 5
MAX_SEQUENCE = 10 ** ID_DIGITS - 1


class EntityKind:
    """
    Descriptor for a document kind.

    The natural ID field is the lowercased kind name followed by ``Id``
    (``User`` -> ``userId``). The ID prefix defaults to the first three
    letters of the name, uppercased, unless the kind declares its own.
    """

    def __init__(
        self,
        name: str,
        collection: str,
        prefix: Optional[str] = None,
        defaults: Optional[Callable[[], Document]] = None,
    ):
        if len(name) < 3:
            raise ValueError(f"Entity name '{name}' is too short to derive an ID prefix")
        if prefix is not None and (len(prefix) != 3 or not prefix.isalpha()):
            raise ValueError("ID prefix must be exactly three letters")

        self.name = name
        self.collection = collection
        self.id_prefix = (prefix or name[:3]).upper()
        self.id_field = f"{name.lower()}Id"
        self._defaults = defaults

    def defaults(self) -> Document:
        """Fresh default field values for a new document."""
        return self._defaults() if self._defaults else {}

    def format_id(self, number: int) -> str:
        return f"{self.id_prefix}{number:0{ID_DIGITS}d}"

    @property
    def id_pattern(self) -> str:
        """Regex matching well-formed natural IDs of this kind."""
        return f"^{self.id_prefix}\\d{{{ID_DIGITS}}}$"

    def __repr__(self) -> str:
        return f"EntityKind({self.name!r}, id_field={self.id_field!r})"


class DocumentModel(Protocol):
    """Store operations the generic document service depends on."""

    kind: EntityKind

    async def insert_one(self, document: Document) -> Document: ...

    async def find(
        self,
        filter: Mapping[str, Any],
        skip: int = 0,
        limit: int = 0,
        sort: Optional[SortSpec] = None,
    ) -> List[Document]: ...

    async def find_one(self, filter: Mapping[str, Any], sort: Optional[SortSpec] = None) -> Optional[Document]: ...

    async def find_one_and_update(self, filter: Mapping[str, Any], fields: Document) -> Optional[Document]: ...

    async def find_one_and_delete(self, filter: Mapping[str, Any]) -> Optional[Document]: ...

    async def count(self, filter: Mapping[str, Any]) -> int: ...

    async def get_counter(self) -> Optional[int]: ...

    async def raise_counter_floor(self, floor: int) -> None: ...

    async def increment_counter(self) -> int: ...


class MongoDocumentModel:
    """
    DocumentModel backed by a Motor collection.

    Sequence counters live in a shared ``counters`` collection, one document
    per kind keyed by the kind's ID field.
    """

    def __init__(
        self,
        kind: EntityKind,
        collection: AsyncIOMotorCollection,
        counters: AsyncIOMotorCollection,
    ):
        self.kind = kind
        self.collection = collection
        self.counters = counters

    async def insert_one(self, document: Document) -> Document:
        # insert_one adds the generated _id to the dict in place
        await self.collection.insert_one(document)
        return document

    async def find(self, filter, skip=0, limit=0, sort=None):
        cursor = self.collection.find(filter, skip=skip, limit=limit, sort=list(sort) if sort else None)
        return await cursor.to_list(length=None)

    async def find_one(self, filter, sort=None):
        return await self.collection.find_one(filter, sort=list(sort) if sort else None)

    async def find_one_and_update(self, filter, fields):
        return await self.collection.find_one_and_update(
            filter,
            {"$set": fields},
            return_document=ReturnDocument.AFTER,
        )

    async def find_one_and_delete(self, filter):
        return await self.collection.find_one_and_delete(filter)

    async def count(self, filter) -> int:
        return await self.collection.count_documents(filter)

    async def get_counter(self) -> Optional[int]:
        counter = await self.counters.find_one({"_id": self.kind.id_field})
        return counter["seq"] if counter else None

    async def raise_counter_floor(self, floor: int) -> None:
        await self.counters.update_one(
            {"_id": self.kind.id_field},
            {"$max": {"seq": floor}},
            upsert=True,
        )

    async def increment_counter(self) -> int:
        counter = await self.counters.find_one_and_update(
            {"_id": self.kind.id_field},
            {"$inc": {"seq": 1}},
            upsert=True,
            return_document=ReturnDocument.AFTER,
        )
        return counter["seq"]

    def __repr__(self) -> str:
        return f"MongoDocumentModel({self.kind.name!r}, collection={self.collection.name!r})"
