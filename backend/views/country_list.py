import asyncio
import logging
from html import escape
from typing import Awaitable, Callable

from models.country import Country
from models.view_state import Error, Loaded, Loading, ViewState, is_terminal
from services.country_service import CountryFetchError, fetch_countries

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[list[Country]]]
Listener = Callable[[ViewState], None]


class CountryListView:
    """One view session: fetches the country list once and renders it.

    The state is an immutable snapshot, replaced on every transition.
    """

    def __init__(self, fetcher: Fetcher | None = None):
        self._fetcher = fetcher or fetch_countries
        self._state: ViewState = Loading()
        self._listeners: list[Listener] = []
        self._task: asyncio.Task | None = None
        self._closed = False

    @property
    def state(self) -> ViewState:
        return self._state

    @property
    def closed(self) -> bool:
        return self._closed

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def start(self) -> asyncio.Task:
        """Start the fetch. Later calls return the task of the first one."""
        if self._task is None:
            self._apply(Loading())
            self._task = asyncio.create_task(self._load())
        return self._task

    async def wait(self) -> ViewState:
        if self._closed:
            return self._state
        await self.start()
        return self._state

    async def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        task = self._task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
        self._listeners.clear()

    def render(self) -> str:
        return render_state(self._state)

    async def _load(self) -> None:
        try:
            countries = await self._fetcher()
        except CountryFetchError as e:
            if e.status_code is not None:
                logger.error("Error fetching data: HTTP error! status: %s", e.status_code)
            else:
                logger.error("Error fetching data: %s", e)
            self._apply(Error())
            return
        except Exception:
            logger.exception("Unexpected error fetching data")
            self._apply(Error())
            return
        self._apply(Loaded(countries=tuple(countries)))

    def _apply(self, state: ViewState) -> None:
        # Responses arriving after teardown are dropped
        if self._closed:
            return
        self._state = state
        for listener in list(self._listeners):
            listener(state)


def render_state(state: ViewState) -> str:
    if isinstance(state, Loading):
        return (
            '<div class="loading-container">'
            '<p class="loading-text">Loading...</p>'
            "</div>"
        )
    if isinstance(state, Error):
        return (
            '<div class="error-container">'
            f'<p class="error-text">{escape(state.message)}</p>'
            "</div>"
        )
    if not state.countries:
        return (
            '<div class="empty-container">'
            '<p class="empty-text">No countries found.</p>'
            "</div>"
        )
    cards = "".join(_render_card(c) for c in state.countries)
    return f'<div class="country-grid-container">{cards}</div>'


def _render_card(country: Country) -> str:
    return (
        '<div class="country-card">'
        f'<img src="{escape(country.flag)}" alt="{escape(country.flag_alt)}" class="country-flag">'
        f'<h2 class="country-name">{escape(country.name)}</h2>'
        "</div>"
    )


_STYLES = """
body { margin: 0; font-family: sans-serif; background: #f3f4f6; }
.app-header { position: sticky; top: 0; background: #fff; text-align: center;
  padding: 1rem; box-shadow: 0 2px 4px rgba(0, 0, 0, 0.1); }
.header-title { margin: 0; font-size: 1.5rem; color: #1f2937; }
.main-content { max-width: 1200px; margin: 0 auto; padding: 1rem; }
.loading-container, .error-container, .empty-container {
  display: flex; align-items: center; justify-content: center; min-height: 50vh; }
.error-text { color: #ef4444; }
.empty-text { color: #6b7280; }
.country-grid-container { display: grid; gap: 1rem;
  grid-template-columns: repeat(auto-fill, minmax(150px, 1fr)); }
.country-card { display: flex; flex-direction: column; align-items: center;
  padding: 1rem; background: #fff; border-radius: 0.75rem;
  box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1); }
.country-flag { width: 100%; aspect-ratio: 4 / 3; object-fit: cover; border-radius: 0.5rem; }
.country-name { margin: 0.5rem 0 0; font-size: 1rem; text-align: center; color: #1f2937; }
"""


def render_page(
    state: ViewState,
    refresh_url: str | None = None,
    refresh_seconds: int = 1,
) -> str:
    """Full HTML document around the rendered state.

    While loading, a refresh URL makes the browser poll the session view.
    """
    refresh = ""
    if refresh_url and not is_terminal(state):
        refresh = (
            f'<meta http-equiv="refresh" '
            f'content="{refresh_seconds};url={escape(refresh_url)}">'
        )
    return (
        "<!DOCTYPE html>"
        '<html lang="en"><head><meta charset="utf-8">'
        '<meta name="viewport" content="width=device-width, initial-scale=1">'
        f"{refresh}<title>Country Flags</title><style>{_STYLES}</style></head>"
        '<body><div class="app-container">'
        '<header class="app-header"><h1 class="header-title">Country Flags</h1></header>'
        f'<main class="main-content">{render_state(state)}</main>'
        "</div></body></html>"
    )
