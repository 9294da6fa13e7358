from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from bson import ObjectId
from pymongo import MongoClient
from pymongo.server_api import ServerApi

from storeadmin.core.config import MONGO_URI, DATABASE_NAME
from storeadmin.core.errors import DocumentNotFound

client = None


def get_client() -> MongoClient:
    global client
    if client is None:
        if not MONGO_URI:
            raise RuntimeError("MONGO_URI not configured. See .env")
        client = MongoClient(MONGO_URI, server_api=ServerApi("1"), serverSelectionTimeoutMS=5000)
    return client


def get_db():
    return get_client()[DATABASE_NAME]


def serialize_doc(doc):
    if not doc:
        return doc
    doc = dict(doc)
    _id = doc.pop("_id", None)
    if _id is not None:
        doc["id"] = str(_id)
    return doc


def doc_key(doc_id: str) -> Dict[str, Any]:
    # Documents written by other clients may carry plain string keys, so a
    # hex id has to match either form.
    if ObjectId.is_valid(doc_id):
        return {"_id": {"$in": [ObjectId(doc_id), doc_id]}}
    return {"_id": doc_id}


class DocumentStore:
    """Key/value access to the remote collections.

    Every method is one round trip. pymongo errors propagate to the caller,
    which decides how to surface them.
    """

    def __init__(self, db):
        self.db = db

    def list(self, collection: str) -> List[dict]:
        return [serialize_doc(d) for d in self.db[collection].find()]

    def get(self, collection: str, doc_id: str) -> Optional[dict]:
        return serialize_doc(self.db[collection].find_one(doc_key(doc_id)))

    def require(self, collection: str, doc_id: str) -> dict:
        doc = self.get(collection, doc_id)
        if doc is None:
            raise DocumentNotFound(collection, doc_id)
        return doc

    def find_one(self, collection: str, query: dict) -> Optional[dict]:
        return serialize_doc(self.db[collection].find_one(query))

    def create(self, collection: str, data: dict) -> str:
        data = dict(data)
        data.setdefault("createdAt", datetime.now(timezone.utc))
        res = self.db[collection].insert_one(data)
        return str(res.inserted_id)

    def update(self, collection: str, doc_id: str, fields: dict) -> None:
        res = self.db[collection].update_one(doc_key(doc_id), {"$set": fields})
        if res.matched_count == 0:
            raise DocumentNotFound(collection, doc_id)

    def delete(self, collection: str, doc_id: str) -> None:
        res = self.db[collection].delete_one(doc_key(doc_id))
        if res.deleted_count == 0:
            raise DocumentNotFound(collection, doc_id)

    def count(self, collection: str) -> int:
        return self.db[collection].count_documents({})

    def collection_names(self) -> List[str]:
        return self.db.list_collection_names()


def get_store() -> DocumentStore:
    return DocumentStore(get_db())
