import asyncio, os
from motor.motor_asyncio import AsyncIOMotorClient
from dotenv import load_dotenv

load_dotenv()
MONGO_URI=os.getenv("MONGO_URI")
DB_NAME=os.getenv("DB_NAME","gottago")

async def main():
    client=AsyncIOMotorClient(MONGO_URI)
    db=client[DB_NAME]
    await db.bathrooms.create_index([("is_approved", 1), ("created_at", -1)])
    await db.reviews.create_index([("bathroom_id", 1), ("created_at", -1)])
    await db.reviews.create_index([("user_id", 1), ("created_at", -1)])
    await db.users.create_index([("email", 1)], unique=True)

    print("Indexes created")
    client.close()

asyncio.run(main())
