"""
MongoDB Service - CRUD operations for document collections.

Collections in this database:
1. users      - students, placement coordinators and admins
2. companies  - placement offers, compensation and cutoffs

Each mutating method performs exactly one write and returns the affected
document (or None when no document matched). Callers are expected to have
validated identifiers already; ObjectId conversion here assumes a valid id.
"""

from datetime import datetime
from typing import Optional, List
from bson import ObjectId
from pymongo import ASCENDING, ReturnDocument
from pymongo.collection import Collection

from app.db.mongodb import get_collection, COLLECTIONS


NOT_PLACED = "np"


# ============================================================
# HELPER: Convert ObjectId to string for JSON serialization
# ============================================================

def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict."""
    if doc is None:
        return None
    if "_id" in doc:
        doc["_id"] = str(doc["_id"])
    return doc


def serialize_docs(docs: list) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def strip_password(doc: dict) -> dict:
    """Remove the password hash before a user leaves the server."""
    if doc is not None:
        doc.pop("password_hash", None)
    return doc


def empty_placement() -> dict:
    return {
        "company_id": NOT_PLACED,
        "company_name": None,
        "ctc": None,
        "ctc_base": None,
        "location": None,
    }


# ============================================================
# USERS COLLECTION
# ============================================================

class UserService:
    """
    Handles user documents.
    Passwords are stored as bcrypt hashes under password_hash.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def insert(
        self,
        name: str,
        email: str,
        password_hash: str,
        roll_no: str = None,
        role: str = "student",
        is_verified: bool = False,
        **extra
    ) -> str:
        """
        Insert a user document.

        Returns:
            MongoDB ObjectId as string
        """
        doc = {
            "name": name,
            "email": email,
            "password_hash": password_hash,
            "roll_no": roll_no,
            "role": role,
            "is_verified": is_verified,
            "placed_at": empty_placement(),
            "created_at": datetime.utcnow(),
            **extra
        }
        result = self.collection.insert_one(doc)
        return str(result.inserted_id)

    def find_all(self) -> List[dict]:
        """All users, sorted by roll number, passwords stripped."""
        cursor = self.collection.find({}).sort("roll_no", ASCENDING)
        return [strip_password(serialize_doc(doc)) for doc in cursor]

    def get_by_id(self, user_id: str, with_password: bool = False) -> Optional[dict]:
        doc = serialize_doc(self.collection.find_one({"_id": ObjectId(user_id)}))
        return doc if with_password else strip_password(doc)

    def get_by_email(self, email: str) -> Optional[dict]:
        """Fetch user by email, including password_hash (login only)."""
        return serialize_doc(self.collection.find_one({"email": email}))

    def _update(self, user_id: str, fields: dict) -> Optional[dict]:
        fields = {**fields, "updated_at": datetime.utcnow()}
        doc = self.collection.find_one_and_update(
            {"_id": ObjectId(user_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )
        return strip_password(serialize_doc(doc))

    def update(self, user_id: str, fields: dict) -> Optional[dict]:
        """Apply a validated partial update."""
        return self._update(user_id, fields)

    def set_verified(self, user_id: str, is_verified: bool) -> Optional[dict]:
        return self._update(user_id, {"is_verified": is_verified})

    def set_role(self, user_id: str, role: str) -> Optional[dict]:
        return self._update(user_id, {"role": role})

    def set_placement(self, user_id: str, company: Optional[dict]) -> Optional[dict]:
        """
        Point the user's placement at `company` (a company document), or
        clear it when company is None. Company details are copied onto the
        user so the student grid needs no join.
        """
        if company is None:
            placed_at = empty_placement()
        else:
            placed_at = {
                "company_id": str(company["_id"]),
                "company_name": company.get("name"),
                "ctc": company.get("ctc"),
                "ctc_base": (company.get("ctc_breakup") or {}).get("base"),
                "location": ", ".join(company.get("locations") or []) or None,
            }
        return self._update(user_id, {"placed_at": placed_at})

    def delete(self, user_id: str) -> Optional[dict]:
        doc = self.collection.find_one_and_delete({"_id": ObjectId(user_id)})
        return strip_password(serialize_doc(doc))


# ============================================================
# COMPANIES COLLECTION
# ============================================================

class CompanyService:
    """
    Handles company documents.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["companies"])

    def insert(self, data: dict) -> dict:
        """Insert a validated company and return the stored document."""
        doc = {**data, "created_at": datetime.utcnow()}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return serialize_doc(doc)

    def find_all(self) -> List[dict]:
        cursor = self.collection.find({}).sort("name", ASCENDING)
        return serialize_docs(list(cursor))

    def get_by_id(self, company_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one({"_id": ObjectId(company_id)}))

    def update(self, company_id: str, fields: dict) -> Optional[dict]:
        fields = {**fields, "updated_at": datetime.utcnow()}
        doc = self.collection.find_one_and_update(
            {"_id": ObjectId(company_id)},
            {"$set": fields},
            return_document=ReturnDocument.AFTER
        )
        return serialize_doc(doc)

    def delete(self, company_id: str) -> Optional[dict]:
        return serialize_doc(self.collection.find_one_and_delete({"_id": ObjectId(company_id)}))
