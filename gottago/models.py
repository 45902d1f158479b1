from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

UserRole = Literal["user", "moderator", "admin"]

RATING_NOT_AVAILABLE = "N/A"


class GeoPoint(BaseModel):
    """A coordinate pair in degrees."""

    model_config = ConfigDict(frozen=True)

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)


class Bathroom(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    name: str
    description: str = ""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    created_at: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_at: Optional[datetime] = None

    # Ratings
    overall_rating: Optional[float] = Field(None, ge=0, le=5)
    cleanliness_rating: Optional[float] = Field(None, ge=0, le=10)
    accessibility_rating: Optional[float] = Field(None, ge=0, le=10)
    privacy_rating: Optional[float] = Field(None, ge=0, le=10)
    facilities_rating: Optional[float] = Field(None, ge=0, le=10)
    review_count: int = Field(0, ge=0)

    # Amenities
    has_changing_table: Optional[bool] = None
    has_accessible: Optional[bool] = None
    has_gender_neutral: Optional[bool] = None
    has_family_friendly: Optional[bool] = None
    has_air_dryer: Optional[bool] = None
    has_paper_towels: Optional[bool] = None
    has_soap: Optional[bool] = None
    has_sanitizer: Optional[bool] = None
    has_changing_station: Optional[bool] = None
    has_tampons: Optional[bool] = None

    # Access
    requires_purchase: Optional[bool] = None
    key_required: Optional[bool] = None

    notes: Optional[str] = None
    is_approved: bool = True
    approved_by: Optional[str] = None

    # Legacy rating fields still present on older records and the sample set
    smell_rating: Optional[float] = Field(None, ge=0, le=10)
    safety_rating: Optional[float] = Field(None, ge=0, le=10)
    supplies_rating: Optional[float] = Field(None, ge=0, le=10)
    crowding_rating: Optional[float] = Field(None, ge=0, le=10)

    @property
    def location(self) -> GeoPoint:
        return GeoPoint(latitude=self.latitude, longitude=self.longitude)

    @classmethod
    def from_doc(cls, doc: dict) -> "Bathroom":
        """Build from a Mongo document, turning _id into the opaque id."""
        data = dict(doc)
        if "_id" in data:
            data["id"] = str(data.pop("_id"))
        return cls(**data)


class Amenities(BaseModel):
    changing_table: bool = False
    accessible: bool = False
    gender_neutral: bool = False
    family_friendly: bool = False
    air_dryer: bool = False
    paper_towels: bool = False
    soap: bool = False
    sanitizer: bool = False
    changing_station: bool = False
    tampons: bool = False


class BathroomCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str = ""
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)
    cleanliness: int = Field(5, ge=0, le=10)
    accessibility: int = Field(5, ge=0, le=10)
    privacy: int = Field(5, ge=0, le=10)
    facilities: int = Field(5, ge=0, le=10)
    overall_rating: float = Field(5.0, ge=0, le=5)
    amenities: Amenities = Field(default_factory=Amenities)
    requires_purchase: bool = False
    key_required: bool = False
    notes: str = ""

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Please enter a bathroom name")
        return value

    @field_validator("overall_rating")
    @classmethod
    def half_steps(cls, value: float) -> float:
        if (value * 2) != int(value * 2):
            raise ValueError("overall_rating must be a multiple of 0.5")
        return value

    def to_doc(self) -> dict:
        """Flatten into the stored bathroom shape."""
        return {
            "name": self.name,
            "description": self.description,
            "latitude": self.latitude,
            "longitude": self.longitude,
            "cleanliness_rating": self.cleanliness,
            "accessibility_rating": self.accessibility,
            "privacy_rating": self.privacy,
            "facilities_rating": self.facilities,
            "overall_rating": self.overall_rating,
            **{f"has_{key}": value for key, value in self.amenities.model_dump().items()},
            "requires_purchase": self.requires_purchase,
            "key_required": self.key_required,
            "notes": self.notes,
        }


class ReviewCreate(BaseModel):
    overall: float = Field(..., ge=0, le=5)
    cleanliness: int = Field(..., ge=0, le=10)
    accessibility: int = Field(..., ge=0, le=10)
    privacy: int = Field(..., ge=0, le=10)
    facilities: int = Field(..., ge=0, le=10)
    comment: Optional[str] = Field(None, max_length=2000)


class UserCreate(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=6)
    full_name: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class UserPublic(BaseModel):
    id: str = Field(alias="_id")
    email: EmailStr
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: UserRole = "user"
    created_at: datetime
    updated_at: Optional[datetime] = None


class RoleUpdate(BaseModel):
    role: UserRole


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"


class BathroomListItem(BaseModel):
    bathroom: Bathroom
    distance_miles: Optional[float] = None
    distance_display: Optional[str] = None
    ratings_display: Dict[str, str]


class BathroomList(BaseModel):
    items: List[BathroomListItem]
    count: int
    sort_by: str
    observer: Optional[GeoPoint] = None


def _stringify(val):
    """Convert MongoDB types to JSON-serializable types."""
    if isinstance(val, ObjectId):
        return str(val)
    elif isinstance(val, datetime):
        return val.isoformat()
    return val


def serialize_doc(doc):
    """Convert Mongo ObjectIds and other types to JSON-serializable formats."""
    if isinstance(doc, list):
        return [serialize_doc(item) for item in doc]
    if not isinstance(doc, dict):
        return _stringify(doc)
    return {key: serialize_doc(value) for key, value in doc.items()}
