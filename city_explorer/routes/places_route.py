from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import Response

from city_explorer.models.places_model import (
    Coordinate,
    PlaceCategory,
    PlaceDetail,
    PlaceSummary,
    Prediction,
)
from city_explorer.services.maps_service import MapsService

router = APIRouter()

# --- Dependency Injection ---
def get_maps_service(request: Request) -> MapsService:
    return request.app.state.maps_service

@router.get("/geocode", response_model=Coordinate)
async def geocode_endpoint(
    city: str = Query(..., min_length=1),
    service: MapsService = Depends(get_maps_service)
):
    return await service.geocode_city(city)

@router.get("/places/nearby", response_model=list[PlaceSummary])
async def nearby_endpoint(
    lat: float = Query(..., ge=-90, le=90),
    lng: float = Query(..., ge=-180, le=180),
    category: PlaceCategory = PlaceCategory.ATTRACTION,
    service: MapsService = Depends(get_maps_service)
):
    return await service.search_nearby(Coordinate(lat=lat, lng=lng), category)

@router.get("/places/photo/{photo_reference:path}")
async def photo_endpoint(
    photo_reference: str,
    max_width: int | None = Query(None, ge=1, le=1600),
    service: MapsService = Depends(get_maps_service)
):
    content, media_type = await service.fetch_photo(photo_reference, max_width)
    return Response(content=content, media_type=media_type)

@router.get("/places/{place_id}", response_model=PlaceDetail)
async def place_detail_endpoint(
    place_id: str,
    service: MapsService = Depends(get_maps_service)
):
    return await service.get_place_detail(place_id)

@router.get("/autocomplete", response_model=list[Prediction])
async def autocomplete_endpoint(
    q: str = "",
    service: MapsService = Depends(get_maps_service)
):
    return await service.autocomplete(q)
