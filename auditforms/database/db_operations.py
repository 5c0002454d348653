"""
Database operations - Generic CRUD functions for the forms and submissions collections
"""
from typing import List, Dict, Optional, Any
from bson import ObjectId
from bson.errors import InvalidId
from auditforms.utils.helpers import utcnow


def to_object_id(doc_id: str) -> Optional[ObjectId]:
    """Parse a string id, returning None when it is not a valid ObjectId"""
    try:
        return ObjectId(doc_id)
    except (InvalidId, TypeError):
        return None


class DBOperations:
    """Generic database operations bound to one Motor database"""

    def __init__(self, database):
        self.database = database

    def collection(self, collection_name: str):
        return self.database[collection_name]

    async def get_all(
        self,
        collection_name: str,
        filter_query: Dict = None,
        skip: int = 0,
        limit: int = 100,
        sort: Optional[List] = None,
    ) -> List[Dict]:
        """Get all documents from a collection with optional filtering"""
        filter_query = filter_query or {}
        cursor = self.collection(collection_name).find(filter_query)
        if sort:
            cursor = cursor.sort(sort)
        cursor = cursor.skip(skip).limit(limit)
        return await cursor.to_list(length=limit)

    async def get_by_id(self, collection_name: str, doc_id: str) -> Optional[Dict]:
        """Get a single document by ID"""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        return await self.collection(collection_name).find_one({"_id": oid})

    async def create(self, collection_name: str, document: Dict) -> Dict:
        """Create a new document"""
        now = utcnow()
        document.setdefault("created_at", now)
        document["updated_at"] = now
        result = await self.collection(collection_name).insert_one(document)
        document["_id"] = result.inserted_id
        return document

    async def update(self, collection_name: str, doc_id: str, update_data: Dict) -> Optional[Dict]:
        """Update a document by ID"""
        oid = to_object_id(doc_id)
        if oid is None:
            return None
        update_data["updated_at"] = utcnow()
        return await self.collection(collection_name).find_one_and_update(
            {"_id": oid},
            {"$set": update_data},
            return_document=True
        )

    async def increment(self, collection_name: str, doc_id: str, field: str, amount: int = 1) -> None:
        """Atomically bump a counter field"""
        oid = to_object_id(doc_id)
        if oid is None:
            return
        await self.collection(collection_name).update_one({"_id": oid}, {"$inc": {field: amount}})

    async def delete(self, collection_name: str, doc_id: str) -> bool:
        """Delete a document by ID"""
        oid = to_object_id(doc_id)
        if oid is None:
            return False
        result = await self.collection(collection_name).delete_one({"_id": oid})
        return result.deleted_count > 0

    async def delete_many(self, collection_name: str, filter_query: Dict) -> int:
        """Delete every document matching the filter"""
        result = await self.collection(collection_name).delete_many(filter_query)
        return result.deleted_count

    async def count(self, collection_name: str, filter_query: Dict = None) -> int:
        """Count documents in a collection"""
        filter_query = filter_query or {}
        return await self.collection(collection_name).count_documents(filter_query)

    async def distinct(self, collection_name: str, key: str, filter_query: Dict = None) -> List[Any]:
        """Distinct values of one key"""
        filter_query = filter_query or {}
        return await self.collection(collection_name).distinct(key, filter_query)
