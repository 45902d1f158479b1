from datetime import datetime, timezone

from gottago.models import Bathroom

_SEEDED_AT = datetime(2024, 1, 1, tzinfo=timezone.utc)

# Shown when the database is not configured, unreachable, or still empty.
SAMPLE_BATHROOMS = [
    Bathroom(
        id="1",
        name="Bryant Park Public Restroom",
        description="Attended restroom behind the library, fresh flowers and classical music.",
        latitude=40.7536,
        longitude=-73.9832,
        created_at=_SEEDED_AT,
        created_by="sample",
        overall_rating=4.8,
        cleanliness_rating=9.5,
        smell_rating=9.0,
        safety_rating=9.2,
        supplies_rating=9.0,
        accessibility_rating=8.5,
        crowding_rating=6.0,
        review_count=128,
        has_accessible=True,
        has_changing_table=True,
    ),
    Bathroom(
        id="2",
        name="Grand Central Terminal Lower Level",
        description="Near the dining concourse, busy at rush hour.",
        latitude=40.7527,
        longitude=-73.9772,
        created_at=_SEEDED_AT,
        created_by="sample",
        overall_rating=3.9,
        cleanliness_rating=7.5,
        smell_rating=6.5,
        safety_rating=8.0,
        supplies_rating=7.0,
        accessibility_rating=8.0,
        crowding_rating=3.0,
        review_count=342,
        has_accessible=True,
    ),
    Bathroom(
        id="3",
        name="Starbucks Times Square",
        description="Ask the barista for the door code.",
        latitude=40.7580,
        longitude=-73.9855,
        created_at=_SEEDED_AT,
        created_by="sample",
        overall_rating=3.2,
        cleanliness_rating=6.0,
        smell_rating=5.5,
        safety_rating=7.0,
        supplies_rating=6.5,
        accessibility_rating=6.0,
        crowding_rating=2.5,
        review_count=87,
        requires_purchase=True,
        key_required=True,
    ),
    Bathroom(
        id="4",
        name="Central Park Heckscher Playground",
        description="Seasonal hours, family friendly.",
        latitude=40.7677,
        longitude=-73.9772,
        created_at=_SEEDED_AT,
        created_by="sample",
        overall_rating=3.5,
        cleanliness_rating=6.5,
        smell_rating=6.0,
        safety_rating=7.5,
        accessibility_rating=7.0,
        review_count=54,
        has_family_friendly=True,
        has_changing_table=True,
    ),
    Bathroom(
        id="5",
        name="Penn Station Amtrak Concourse",
        description="Past the ticket windows, often a line.",
        latitude=40.7506,
        longitude=-73.9935,
        created_at=_SEEDED_AT,
        created_by="sample",
        overall_rating=2.4,
        cleanliness_rating=4.0,
        smell_rating=3.5,
        safety_rating=5.5,
        supplies_rating=5.0,
        crowding_rating=2.0,
        review_count=211,
    ),
]


def sample_bathrooms():
    """A fresh copy of the sample collection."""
    return list(SAMPLE_BATHROOMS)
