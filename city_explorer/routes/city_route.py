from fastapi import APIRouter, Depends, Header, Query, Request

from city_explorer.models.places_model import CityView, PlaceCategory, PlaceDetail
from city_explorer.routes.places_route import get_maps_service
from city_explorer.services.explorer_service import CityExplorer
from city_explorer.services.maps_service import MapsService

router = APIRouter()

# --- Dependency Injection ---
def get_explorer(
    request: Request,
    session_id: str = Header("default", alias="X-Session-Id"),
    service: MapsService = Depends(get_maps_service)
) -> CityExplorer:
    """
    One explorer per client session, kept on the app so generations survive
    between requests and an older city view can be told apart from a newer one.
    """
    explorers: dict[str, CityExplorer] = request.app.state.explorers
    explorer = explorers.get(session_id)
    if explorer is None or explorer.maps is not service:
        explorer = CityExplorer(service)
        explorers[session_id] = explorer
    return explorer

@router.get("/city/{name}", response_model=CityView)
async def city_endpoint(
    name: str,
    category: PlaceCategory = PlaceCategory.ATTRACTION,
    explorer: CityExplorer = Depends(get_explorer)
):
    """Everything the city page needs in one call: map center plus the pins for one tab."""
    return await explorer.open_city(name, category)

@router.get("/city/{name}/places/{place_id}", response_model=PlaceDetail)
async def city_place_detail_endpoint(
    name: str,
    place_id: str,
    generation: int = Query(..., ge=1),
    explorer: CityExplorer = Depends(get_explorer)
):
    """Details for a pin on the city page; answers 409 once a newer view replaced it."""
    return await explorer.place_detail(generation, place_id)
