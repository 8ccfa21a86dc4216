from datetime import date
from enum import Enum
from typing import List, Optional

from pydantic import Field

from review_dashboard.schemas.base import CamelModel


class PropertyType(str, Enum):
    APARTMENT = "Apartment"
    STUDIO = "Studio"
    HOUSE = "House"


class AmenityCategory(str, Enum):
    LIVING_ROOM = "Living room"
    INTERNET_OFFICE = "Internet & office"
    BEDROOM_LAUNDRY = "Bedroom & laundry"
    KITCHEN_DINING = "Kitchen & dining"
    GENERAL = "General"


class Coordinates(CamelModel):
    lat: float
    lng: float


class Amenity(CamelModel):
    name: str
    category: AmenityCategory
    icon: str


class Policies(CamelModel):
    check_in: str
    check_out: str
    house_rules: List[str] = []
    cancellation_policy: str = ""


class Property(CamelModel):
    id: int = Field(..., gt=0)
    name: str
    location: str
    address: str
    coordinates: Coordinates
    type: PropertyType
    bedrooms: int = Field(0, ge=0)
    bathrooms: int = Field(0, ge=0)
    guests: int = Field(0, ge=0)
    average_rating: float = 0.0
    total_reviews: int = 0
    approved_reviews: int = 0
    price: Optional[float] = Field(None, ge=0)
    description: str = ""
    images: List[str] = []
    amenities: List[Amenity] = []
    policies: Policies


class PropertyStats(CamelModel):
    property_id: int
    name: str
    location: str
    total_reviews: int = 0
    approved_reviews: int = 0
    flagged_reviews: int = 0
    average_rating: float = 0.0
    approval_rate: float = 0.0


class BookingQuote(CamelModel):
    check_in: date
    check_out: date
    nights: int
    nightly_price: float
    base_price: float
    discount: float
    cleaning_fee: float
    total: float
