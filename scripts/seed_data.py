import asyncio, os
from datetime import datetime, timezone
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv
from passlib.context import CryptContext

from gottago.services.sample_data import SAMPLE_BATHROOMS

load_dotenv()

pwd_context = CryptContext(schemes=["bcrypt_sha256"], deprecated="auto")

async def main():
    client = AsyncIOMotorClient(os.getenv("MONGO_URI"))
    db = client[os.getenv("DB_NAME","gottago")]
    now = datetime.now(timezone.utc)
    admin = await db.users.insert_one(
        {
            "email": os.getenv("SEED_ADMIN_EMAIL", "admin@example.com"),
            "hashed_password": pwd_context.hash(os.getenv("SEED_ADMIN_PASSWORD", "change-me-please")),
            "full_name": "Admin",
            "role": "admin",
            "created_at": now,
            "updated_at": now,
        }
    )

    docs = []
    for sample in SAMPLE_BATHROOMS:
        doc = sample.model_dump(exclude={"id"})
        doc.update({"created_by": str(admin.inserted_id), "created_at": now, "updated_at": now, "is_approved": True})
        docs.append(doc)
    bathrooms = await db.bathrooms.insert_many(docs)

    print("Seeded demo data successfully")
    print(f"   - Created admin: {admin.inserted_id}")
    print(f"   - Created {len(bathrooms.inserted_ids)} bathrooms")
    client.close()

asyncio.run(main())
