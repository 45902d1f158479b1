import logging
from datetime import datetime, timezone
from typing import List, Optional

from bson import ObjectId
from fastapi import HTTPException
from pymongo.errors import PyMongoError

from gottago.models import Bathroom, BathroomCreate, ReviewCreate, serialize_doc
from gottago.services.sample_data import SAMPLE_BATHROOMS, sample_bathrooms

logger = logging.getLogger(__name__)

LIST_LIMIT = 500


def _require_db(database):
    if database is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return database


def _oid(value: str, field: str = "id") -> ObjectId:
    if not ObjectId.is_valid(value):
        raise HTTPException(status_code=400, detail=f"Invalid {field}")
    return ObjectId(value)


def _to_bathrooms(docs: List[dict]) -> List[Bathroom]:
    bathrooms = []
    for doc in docs:
        try:
            bathrooms.append(Bathroom.from_doc(doc))
        except ValueError as e:
            logger.warning("Skipping malformed bathroom %s: %s", doc.get("_id"), e)
    return bathrooms


async def list_approved(database) -> List[Bathroom]:
    """
    Approved bathrooms, newest first.
    Falls back to the sample collection when the store is missing, failing, or empty.
    """
    if database is None:
        logger.info("Database not configured; serving sample bathrooms")
        return sample_bathrooms()

    try:
        cursor = database.bathrooms.find({"is_approved": True}).sort("created_at", -1).limit(LIST_LIMIT)
        docs = await cursor.to_list(LIST_LIMIT)
    except PyMongoError as e:
        logger.error("Error fetching bathrooms, serving sample data: %s", e)
        return sample_bathrooms()

    bathrooms = _to_bathrooms(docs)
    if not bathrooms:
        logger.info("No bathrooms stored yet; serving sample bathrooms")
        return sample_bathrooms()
    return bathrooms


async def get_bathroom(database, bathroom_id: str) -> Optional[Bathroom]:
    if database is not None and ObjectId.is_valid(bathroom_id):
        try:
            doc = await database.bathrooms.find_one({"_id": ObjectId(bathroom_id)})
        except PyMongoError as e:
            logger.error("Error fetching bathroom %s: %s", bathroom_id, e)
            doc = None
        if doc:
            return Bathroom.from_doc(doc)

    for bathroom in sample_bathrooms():
        if bathroom.id == bathroom_id:
            return bathroom
    return None


async def create_bathroom(database, payload: BathroomCreate, user: dict) -> Bathroom:
    database = _require_db(database)
    now = datetime.now(timezone.utc)
    doc = payload.to_doc()
    doc.update(
        {
            "created_by": str(user["_id"]),
            "created_at": now,
            "updated_at": now,
            "review_count": 0,
            # auto-approve for now
            "is_approved": True,
        }
    )
    result = await database.bathrooms.insert_one(doc)
    doc["_id"] = result.inserted_id
    logger.info("Bathroom %s created by %s", result.inserted_id, doc["created_by"])
    return Bathroom.from_doc(doc)


async def _refresh_review_aggregates(database, bathroom_oid: ObjectId) -> dict:
    pipeline = [
        {"$match": {"bathroom_id": bathroom_oid}},
        {
            "$group": {
                "_id": "$bathroom_id",
                "overall_rating": {"$avg": "$overall"},
                "cleanliness_rating": {"$avg": "$cleanliness"},
                "accessibility_rating": {"$avg": "$accessibility"},
                "privacy_rating": {"$avg": "$privacy"},
                "facilities_rating": {"$avg": "$facilities"},
                "review_count": {"$sum": 1},
            }
        },
    ]
    agg = await database.reviews.aggregate(pipeline).to_list(1)
    if not agg:
        return {}
    record = agg[0]
    update = {key: value for key, value in record.items() if key != "_id"}
    for key, value in update.items():
        if key != "review_count" and value is not None:
            update[key] = round(value, 2)
    update["updated_at"] = datetime.now(timezone.utc)
    await database.bathrooms.update_one({"_id": bathroom_oid}, {"$set": update})
    return update


async def add_review(database, bathroom_id: str, payload: ReviewCreate, user: dict) -> dict:
    database = _require_db(database)
    if any(sample.id == bathroom_id for sample in SAMPLE_BATHROOMS):
        raise HTTPException(status_code=409, detail="Sample bathrooms cannot be reviewed")
    bathroom_oid = _oid(bathroom_id, "bathroom_id")
    bathroom = await database.bathrooms.find_one({"_id": bathroom_oid})
    if not bathroom:
        raise HTTPException(status_code=404, detail="Bathroom not found")

    now = datetime.now(timezone.utc)
    doc = payload.model_dump()
    doc.update(
        {
            "bathroom_id": bathroom_oid,
            "user_id": str(user["_id"]),
            "created_at": now,
            "updated_at": now,
        }
    )
    result = await database.reviews.insert_one(doc)
    doc["_id"] = result.inserted_id

    aggregates = await _refresh_review_aggregates(database, bathroom_oid)
    logger.info("Review %s added to bathroom %s (%s reviews)", result.inserted_id, bathroom_id, aggregates.get("review_count"))
    return {"review": serialize_doc(doc), "aggregates": serialize_doc(aggregates)}


async def list_reviews(database, bathroom_id: str, limit: int = 50) -> List[dict]:
    # sample bathrooms have no stored reviews
    if database is None or not ObjectId.is_valid(bathroom_id):
        return []
    bathroom_oid = ObjectId(bathroom_id)
    cursor = database.reviews.find({"bathroom_id": bathroom_oid}).sort("created_at", -1).limit(limit)
    reviews: List[dict] = []
    async for doc in cursor:
        reviews.append(serialize_doc(doc))
    return reviews
