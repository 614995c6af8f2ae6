from pydantic import BaseModel, ConfigDict, Field, computed_field
from typing import List, Optional
from enum import Enum
from urllib.parse import quote

# Photos are served through our own proxy route, never with the provider key
PHOTO_ROUTE = "/places/photo"

def photo_path(photo_reference: str) -> str:
    return f"{PHOTO_ROUTE}/{quote(photo_reference, safe='')}"

# --- Enums ---
class PlaceCategory(str, Enum):
    ATTRACTION = "attraction"
    LODGING = "lodging"
    RESTAURANT = "restaurant"

    @property
    def display_title(self) -> str:
        return CATEGORY_TITLES[self]

CATEGORY_TITLES = {
    PlaceCategory.ATTRACTION: "Top Places",
    PlaceCategory.LODGING: "Hotels & Stays",
    PlaceCategory.RESTAURANT: "Restaurants & Food",
}

class LoadState(str, Enum):
    NOT_STARTED = "NOT_STARTED"
    LOADING = "LOADING"
    READY = "READY"

# --- Domain Models ---
class Coordinate(BaseModel):
    model_config = ConfigDict(frozen=True)

    lat: float
    lng: float

class PlacePhoto(BaseModel):
    model_config = ConfigDict(frozen=True)

    photo_reference: str
    width: Optional[int] = None
    height: Optional[int] = None
    html_attributions: List[str] = []

    @computed_field
    @property
    def url(self) -> str:
        return photo_path(self.photo_reference)

class PlaceSummary(BaseModel):
    """A nearby-search hit, enough to draw a marker and a card."""
    model_config = ConfigDict(frozen=True)

    name: str
    rating: float = Field(default=0.0, ge=0.0)
    vicinity: str = ""
    location: Coordinate
    place_id: Optional[str] = None
    photo_reference: Optional[str] = None

    @computed_field
    @property
    def photo_url(self) -> Optional[str]:
        return photo_path(self.photo_reference) if self.photo_reference else None

class PlaceDetail(PlaceSummary):
    website: Optional[str] = None
    formatted_address: Optional[str] = None
    types: List[str] = []
    photos: List[PlacePhoto] = []

class Prediction(BaseModel):
    model_config = ConfigDict(frozen=True)

    description: str
    place_id: Optional[str] = None

class CityView(BaseModel):
    """One city page: where the map is centered and what is pinned on it."""
    generation: int
    city: str
    category: PlaceCategory
    title: str
    center: Coordinate
    places: List[PlaceSummary] = []
