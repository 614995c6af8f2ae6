import asyncio
import logging
from city_explorer.core.exceptions import DetailError, StaleResultError
from city_explorer.core.logger import logs
from city_explorer.models.places_model import CityView, PlaceCategory, PlaceDetail
from city_explorer.services.maps_service import MapsService

class CityExplorer:
    """
    Drives one city page: geocode -> nearby search -> lazy place details.
    Each open_city() starts a new generation; anything still in flight for an
    older generation is discarded with StaleResultError.
    """
    def __init__(self, maps: MapsService):
        self.maps = maps
        self._generation = 0

    @property
    def current_generation(self) -> int:
        return self._generation

    def _check_current(self, generation: int):
        if generation != self._generation:
            logs.log(logging.INFO, f"Dropping stale result for generation {generation} (current {self._generation})")
            raise StaleResultError(generation, self._generation)

    async def open_city(self, city: str, category: PlaceCategory = PlaceCategory.ATTRACTION) -> CityView:
        self._generation += 1
        generation = self._generation
        logs.log(logging.INFO, f"Opening city view #{generation}: {city} ({category.value})")

        center = await self.maps.geocode_city(city)
        self._check_current(generation)

        places = await self.maps.search_nearby(center, category)
        self._check_current(generation)

        return CityView(
            generation=generation,
            city=city,
            category=category,
            title=category.display_title,
            center=center,
            places=places,
        )

    async def place_detail(self, generation: int, place_id: str) -> PlaceDetail:
        self._check_current(generation)
        detail = await self.maps.get_place_detail(place_id)
        self._check_current(generation)
        return detail

    async def details_for(self, view: CityView) -> list[PlaceDetail]:
        """
        Fetches details for every place in the view in parallel.
        Places whose detail lookup fails are left out rather than failing the view.
        """
        place_ids = [p.place_id for p in view.places if p.place_id]
        results = await asyncio.gather(
            *(self.place_detail(view.generation, place_id) for place_id in place_ids),
            return_exceptions=True,
        )

        details = []
        for place_id, result in zip(place_ids, results):
            if isinstance(result, DetailError):
                logs.log(logging.WARNING, f"Skipping details for {place_id}: {str(result)}")
                continue
            if isinstance(result, BaseException):
                raise result
            details.append(result)
        return details
