import httpx
import logging
from city_explorer.core.config import settings
from city_explorer.core.exceptions import (
    AutocompleteError,
    DetailError,
    GeocodeError,
    LoadError,
    MapsError,
    SearchError,
)
from city_explorer.core.logger import logs
from city_explorer.core.maps_loader import MapsLoader
from city_explorer.models.places_model import (
    Coordinate,
    PlaceCategory,
    PlaceDetail,
    PlacePhoto,
    PlaceSummary,
    Prediction,
)

DETAIL_FIELDS = [
    "place_id", "name", "rating", "vicinity", "geometry",
    "photos", "types", "website", "formatted_address",
]

class MapsService:
    """
    Lookup facade over the maps provider.
    Every lookup waits for the loader, then translates the provider's
    status convention into a typed result or a MapsError.
    """
    def __init__(
        self,
        loader: MapsLoader,
        search_radius: int | None = None,
        max_results: int | None = None,
        category_types: dict[str, str] | None = None,
    ):
        self.loader = loader
        self.search_radius = search_radius or settings.SEARCH_RADIUS
        self.max_results = max_results or settings.MAX_RESULTS
        self.category_types = category_types or dict(settings.CATEGORY_TYPES)

    async def ensure_loaded(self):
        await self.loader.ensure_loaded()

    async def geocode_city(self, name: str) -> Coordinate:
        if not name or not name.strip():
            raise GeocodeError("City name is empty", status="INVALID_REQUEST")

        data = await self._request("geocode", {"address": name.strip()}, GeocodeError)
        results = data.get("results") or []
        if not results:
            raise GeocodeError(f"Failed to geocode city: {name}", status="ZERO_RESULTS")

        location = results[0]["geometry"]["location"]
        coordinate = Coordinate(lat=location["lat"], lng=location["lng"])
        logs.log(logging.INFO, f"Geocoded '{name}' to {coordinate.lat}, {coordinate.lng}")
        return coordinate

    async def search_nearby(self, center: Coordinate, category: PlaceCategory | str) -> list[PlaceSummary]:
        category_value = category.value if isinstance(category, PlaceCategory) else str(category)
        provider_type = self.category_types.get(category_value)
        if provider_type is None:
            raise SearchError(f"Unknown place category: {category_value}", status="INVALID_REQUEST")

        params = {
            "location": f"{center.lat},{center.lng}",
            "radius": self.search_radius,
            "type": provider_type,
        }
        data = await self._request(
            "place/nearbysearch", params, SearchError, ok_statuses=("OK", "ZERO_RESULTS")
        )

        places = []
        for raw in data.get("results") or []:
            if len(places) >= self.max_results:
                break
            # results without a name or a position cannot be shown on the map
            if not raw.get("name") or self._location(raw) is None:
                continue
            places.append(PlaceSummary(**self._summary_fields(raw)))

        logs.log(
            logging.INFO,
            f"Nearby search found {len(places)} {category_value} places around {center.lat}, {center.lng}"
        )
        return places

    async def get_place_detail(self, place_id: str) -> PlaceDetail:
        if not place_id or not place_id.strip():
            raise DetailError("Place id is empty", status="INVALID_REQUEST")

        params = {"place_id": place_id, "fields": ",".join(DETAIL_FIELDS)}
        data = await self._request("place/details", params, DetailError)
        result = data.get("result")
        if not result:
            raise DetailError(f"Failed to get place details for {place_id}", status="NOT_FOUND")
        if self._location(result) is None:
            raise DetailError(f"Place {place_id} has no location", status="NOT_FOUND")

        photos = [
            PlacePhoto(
                photo_reference=p["photo_reference"],
                width=p.get("width"),
                height=p.get("height"),
                html_attributions=p.get("html_attributions") or [],
            )
            for p in result.get("photos") or []
            if p.get("photo_reference")
        ]

        fields = self._summary_fields(result)
        fields["place_id"] = fields["place_id"] or place_id
        return PlaceDetail(
            **fields,
            website=result.get("website"),
            formatted_address=result.get("formatted_address"),
            types=result.get("types") or [],
            photos=photos,
        )

    async def autocomplete(self, partial_text: str) -> list[Prediction]:
        # No provider call for blank input
        if not partial_text or not partial_text.strip():
            return []

        params = {"input": partial_text, "types": "(cities)"}
        data = await self._request(
            "place/autocomplete", params, AutocompleteError, ok_statuses=("OK", "ZERO_RESULTS")
        )
        return [
            Prediction(description=p["description"], place_id=p.get("place_id"))
            for p in data.get("predictions") or []
            if p.get("description")
        ]

    def photo_url(self, photo_reference: str, max_width: int | None = None) -> str:
        """URL of a place photo, as used for card thumbnails and info windows."""
        url = httpx.URL(
            f"{self.loader.base_url}/place/photo",
            params={
                "maxwidth": max_width or settings.PHOTO_MAX_WIDTH,
                "photo_reference": photo_reference,
                "key": self.loader.api_key,
            },
        )
        return str(url)

    async def fetch_photo(self, photo_reference: str, max_width: int | None = None) -> tuple[bytes, str]:
        """
        Downloads a place photo server-side so callers never see the API key.
        Returns the image bytes and their content type.
        """
        if not photo_reference or not photo_reference.strip():
            raise DetailError("Photo reference is empty", status="INVALID_REQUEST")

        client = await self.loader.ensure_loaded()
        try:
            # the provider answers with a redirect to the image host
            response = await client.get(self.photo_url(photo_reference, max_width), follow_redirects=True)
            response.raise_for_status()
        except httpx.HTTPError as e:
            logs.log(logging.WARNING, f"Maps photo {photo_reference} failed: {str(e)}")
            raise DetailError(f"Failed to fetch photo {photo_reference}", status="NOT_FOUND") from e

        return response.content, response.headers.get("content-type", "image/jpeg")

    async def _request(
        self,
        endpoint: str,
        params: dict,
        error_cls: type[MapsError],
        ok_statuses: tuple[str, ...] = ("OK",),
    ) -> dict:
        """
        The only place that speaks the provider's status convention.
        REQUEST_DENIED means the key was rejected, which surfaces as a LoadError
        and forces the next lookup to load again.
        """
        client = await self.loader.ensure_loaded()
        url = f"{self.loader.base_url}/{endpoint}/json"

        try:
            response = await client.get(url, params={**params, "key": self.loader.api_key})
            response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logs.log(logging.ERROR, f"Maps {endpoint} request failed: {str(e)}", exc_info=True)
            raise error_cls(f"Maps {endpoint} request failed: {str(e)}") from e

        status = data.get("status", "UNKNOWN_ERROR")
        if status == "REQUEST_DENIED":
            logs.log(logging.ERROR, f"Maps {endpoint} denied: {data.get('error_message')}")
            await self.loader.invalidate(client)
            raise LoadError(data.get("error_message") or "Request denied by maps provider", status=status)

        if status not in ok_statuses:
            logs.log(logging.WARNING, f"Maps {endpoint} returned {status}", extra={"params": params})
            raise error_cls(f"Maps {endpoint} failed", status=status)

        return data

    @staticmethod
    def _location(raw: dict) -> Coordinate | None:
        location = (raw.get("geometry") or {}).get("location") or {}
        if location.get("lat") is None or location.get("lng") is None:
            return None
        return Coordinate(lat=location["lat"], lng=location["lng"])

    @classmethod
    def _summary_fields(cls, raw: dict) -> dict:
        photos = raw.get("photos") or []
        return {
            "name": raw.get("name") or "",
            "rating": max(0.0, float(raw.get("rating") or 0)),
            "vicinity": raw.get("vicinity") or "",
            "location": cls._location(raw),
            "place_id": raw.get("place_id"),
            "photo_reference": photos[0].get("photo_reference") if photos else None,
        }

    async def aclose(self):
        await self.loader.aclose()

    async def __aenter__(self) -> "MapsService":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
