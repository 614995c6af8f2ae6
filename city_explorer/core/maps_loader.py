"""
Loads the maps provider exactly once and hands out the shared HTTP client.

Loading means fetching the provider's JavaScript bootstrap (the same URL a
browser page would inject) with our key. Every lookup awaits `ensure_loaded()`
first, so no provider call goes out before the load has resolved.
"""
import asyncio
import logging
import httpx

from city_explorer.core.config import settings
from city_explorer.core.exceptions import LoadError
from city_explorer.core.logger import logs
from city_explorer.models.places_model import LoadState


class MapsLoader:
    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        libraries: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = settings.GOOGLE_MAPS_API_KEY if api_key is None else api_key
        self.base_url = (base_url or settings.MAPS_BASE_URL).rstrip("/")
        self.libraries = libraries or settings.MAPS_LIBRARIES
        self.timeout = timeout or settings.REQUEST_TIMEOUT
        self.transport = transport

        self._state = LoadState.NOT_STARTED
        self._pending: asyncio.Task | None = None
        self._client: httpx.AsyncClient | None = None
        self.load_attempts = 0

    @property
    def state(self) -> LoadState:
        return self._state

    @property
    def script_url(self) -> str:
        return f"{self.base_url}/js"

    async def ensure_loaded(self) -> httpx.AsyncClient:
        """
        Returns the ready client, starting the load on first use.
        Concurrent callers share one pending load and see the same outcome.
        """
        if self._state is LoadState.READY and self._client is not None:
            return self._client

        if self._pending is None:
            self._state = LoadState.LOADING
            self._pending = asyncio.ensure_future(self._load())

        # shield: a cancelled caller must not cancel the load the others wait on
        return await asyncio.shield(self._pending)

    async def _load(self) -> httpx.AsyncClient:
        self.load_attempts += 1
        logs.log(logging.INFO, f"Loading maps script (attempt {self.load_attempts})")

        if not self.api_key:
            self._abandon()
            logs.log(logging.ERROR, "Maps script not loaded: GOOGLE_MAPS_API_KEY is not set")
            raise LoadError("GOOGLE_MAPS_API_KEY is not set")

        client = httpx.AsyncClient(timeout=self.timeout, transport=self.transport)
        try:
            response = await client.get(
                self.script_url,
                params={"key": self.api_key, "libraries": self.libraries},
            )
            response.raise_for_status()
        except httpx.HTTPError as e:
            await client.aclose()
            self._abandon()
            logs.log(logging.ERROR, f"Failed to load maps script: {str(e)}")
            raise LoadError(f"Failed to load maps script: {str(e)}") from e
        except asyncio.CancelledError:
            await client.aclose()
            self._abandon()
            raise

        self._client = client
        self._state = LoadState.READY
        logs.log(logging.INFO, "✓ Maps script loaded")
        return client

    def _reset(self):
        self._state = LoadState.NOT_STARTED
        self._pending = None
        self._client = None

    def _abandon(self):
        # only the attempt that is still pending may reset the state
        if self._pending is asyncio.current_task():
            self._reset()

    async def invalidate(self, client: httpx.AsyncClient):
        """
        Drops the client a rejected request went through so the next lookup loads again.
        A late rejection from an already replaced client leaves the current one alone.
        """
        if self._state is not LoadState.READY or client is not self._client:
            return
        self._reset()
        await client.aclose()
        logs.log(logging.WARNING, "Maps client invalidated, next lookup will reload the script")

    async def aclose(self):
        pending = self._pending
        client = self._client
        self._reset()
        if pending is not None and not pending.done():
            pending.cancel()
        if client is not None:
            await client.aclose()

    async def __aenter__(self) -> "MapsLoader":
        return self

    async def __aexit__(self, *exc_info):
        await self.aclose()
