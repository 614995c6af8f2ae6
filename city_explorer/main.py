import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from city_explorer.core.exceptions import (
    AutocompleteError,
    DetailError,
    GeocodeError,
    LoadError,
    MapsError,
    SearchError,
    StaleResultError,
)
from city_explorer.core.logger import logs
from city_explorer.core.maps_loader import MapsLoader
from city_explorer.routes.city_route import router as city_router
from city_explorer.routes.places_route import router as places_router
from city_explorer.services.maps_service import MapsService

ERROR_STATUS_CODES = {
    LoadError: 503,
    GeocodeError: 404,
    DetailError: 404,
    SearchError: 502,
    AutocompleteError: 502,
    StaleResultError: 409,
}

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.maps_service = MapsService(MapsLoader())
    app.state.explorers = {}
    yield
    await app.state.maps_service.aclose()

app = FastAPI(title="City Explorer", lifespan=lifespan)
app.include_router(places_router)
app.include_router(city_router)

@app.exception_handler(MapsError)
async def maps_error_handler(request: Request, exc: MapsError):
    status_code = ERROR_STATUS_CODES.get(type(exc), 500)
    logs.log(logging.WARNING, f"{request.url.path} failed with {status_code}: {str(exc)}")
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "detail": exc.message, "status": exc.status},
    )

# --- Root Endpoint ---
@app.get("/")
async def root():
    return {
        "message": "Welcome to City Explorer API",
        "status": "running",
        "endpoints": {
            "health": "/health",
            "geocode": "/geocode",
            "nearby": "/places/nearby",
            "details": "/places/{place_id}",
            "photo": "/places/photo/{photo_reference}",
            "autocomplete": "/autocomplete",
            "city": "/city/{name}",
            "city_place": "/city/{name}/places/{place_id}?generation=",
            "docs": "/docs"
        },
        "version": "1.0.0"
    }

# --- Health Check ---
@app.get("/health")
async def health_check(request: Request):
    service = getattr(request.app.state, "maps_service", None)
    maps_state = service.loader.state.value if service else "NOT_STARTED"
    return {"status": "ok", "service": "City Explorer", "maps": maps_state}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("city_explorer.main:app", host="0.0.0.0", port=8000, reload=True)
