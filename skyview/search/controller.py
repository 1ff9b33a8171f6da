"""Incremental city search: debounce, rate limiting, cancellation and staleness."""

import logging
from dataclasses import dataclass, field
from typing import Any, Protocol

import httpx

from skyview.errors import (
    ApiError,
    RateLimitedError,
    RequestCancelled,
    SearchError,
    SearchFailure,
)
from skyview.models.search import CitySuggestion, Query, QueryState, SearchStats
from skyview.search.cancel import CancelToken
from skyview.search.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

MIN_SEARCH_CHARACTERS = 2
DEBOUNCE_SECONDS = 0.25
MIN_REQUEST_INTERVAL = 0.3


class CitySource(Protocol):
    async def search_cities(
        self, name_prefix: str, token: CancelToken | None = None
    ) -> dict: ...


@dataclass
class SearchSession:
    """Per-controller mutable state.

    ``pending_token`` is replaced on every submission and cancelled on
    disposal. The rate limiter holds the last dispatch timestamp.
    """

    rate_limiter: RateLimiter
    current_sequence_id: int = 0
    pending_token: CancelToken | None = None
    disposed: bool = False
    stats: SearchStats = field(default_factory=SearchStats)


class SearchController:
    def __init__(
        self,
        client: CitySource,
        min_chars: int = MIN_SEARCH_CHARACTERS,
        debounce: float = DEBOUNCE_SECONDS,
        min_interval: float = MIN_REQUEST_INTERVAL,
        rate_limiter: RateLimiter | None = None,
    ):
        self.client = client
        self.min_chars = min_chars
        self.debounce = debounce
        self.session = SearchSession(rate_limiter=rate_limiter or RateLimiter(min_interval))
        self.last_state = QueryState.IDLE

    @property
    def stats(self) -> SearchStats:
        return self.session.stats

    async def submit(self, text: str) -> list[CitySuggestion]:
        """Resolve ``text`` to city suggestions.

        Superseded, stale and rate-limited queries resolve to []. Any other
        upstream failure raises SearchError(FAILED).
        """
        session = self.session
        query_text = (text or "").strip()
        session.stats.submitted += 1

        # Whatever was pending belongs to older input now.
        if session.pending_token is not None:
            session.pending_token.cancel()
            session.pending_token = None

        if session.disposed or len(query_text) < self.min_chars:
            self.last_state = QueryState.IDLE
            return []

        token = CancelToken()
        session.pending_token = token
        query: Query | None = None
        try:
            self.last_state = QueryState.DEBOUNCING
            await token.sleep(self.debounce)

            self.last_state = QueryState.RATE_LIMIT_WAITING
            await session.rate_limiter.acquire(token)

            session.current_sequence_id += 1
            query = Query(text=query_text, sequence_id=session.current_sequence_id)
            session.stats.dispatched += 1
            self.last_state = QueryState.IN_FLIGHT
            raw = await self.client.search_cities(query.text, token)
        except RequestCancelled:
            logger.debug("City search for %r superseded", query_text)
            self._finish(token, QueryState.CANCELLED, SearchFailure.CANCELLED)
            return []
        except RateLimitedError as e:
            # Soft failure: no results, but keep a record of it.
            logger.warning("City search rate limited for %r", query_text)
            session.stats.errors.append(str(SearchError(SearchFailure.RATE_LIMITED, e)))
            self._finish(token, QueryState.FAILED, SearchFailure.RATE_LIMITED)
            return []
        except (httpx.HTTPError, ApiError, ValueError) as e:
            if self._is_stale(query):
                self._finish(token, QueryState.STALE, "stale")
                return []
            if token.cancelled:
                self._finish(token, QueryState.CANCELLED, SearchFailure.CANCELLED)
                return []
            logger.error("City search failed for %r: %s", query_text, e)
            error = SearchError(SearchFailure.FAILED, e)
            session.stats.errors.append(str(error))
            self._finish(token, QueryState.FAILED, SearchFailure.FAILED)
            raise error from e

        if self._is_stale(query):
            logger.debug(
                "Dropping stale results for %r (seq %d, latest %d)",
                query.text, query.sequence_id, session.current_sequence_id,
            )
            self._finish(token, QueryState.STALE, "stale")
            return []
        if token.cancelled:
            self._finish(token, QueryState.CANCELLED, SearchFailure.CANCELLED)
            return []

        suggestions = map_city_records(raw)
        self._finish(token, QueryState.RESOLVED, "resolved")
        return suggestions

    async def suggest(self, text: str) -> list[CitySuggestion]:
        """Like submit, but a failed search shows as no results."""
        try:
            return await self.submit(text)
        except SearchError as e:
            logger.info("Showing no results after search failure: %s", e.cause)
            return []

    def dispose(self) -> None:
        self.session.disposed = True
        if self.session.pending_token is not None:
            self.session.pending_token.cancel()
            self.session.pending_token = None

    async def __aenter__(self) -> "SearchController":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        self.dispose()

    def _is_stale(self, query: Query | None) -> bool:
        return query is not None and query.sequence_id != self.session.current_sequence_id

    def _finish(self, token: CancelToken, state: QueryState, outcome: str) -> None:
        stats = self.session.stats
        setattr(stats, outcome, getattr(stats, outcome) + 1)
        if self.session.pending_token is token:
            self.session.pending_token = None
            self.last_state = state


def map_city_records(raw: Any) -> list[CitySuggestion]:
    """Map GeoDB city records to suggestions, dropping incomplete ones."""
    if not isinstance(raw, dict):
        return []
    records = raw.get("data")
    if not isinstance(records, list):
        return []

    suggestions: list[CitySuggestion] = []
    for record in records:
        if not isinstance(record, dict):
            continue
        name = record.get("name")
        country_code = record.get("countryCode")
        try:
            latitude = float(record["latitude"])
            longitude = float(record["longitude"])
        except (KeyError, TypeError, ValueError):
            continue
        if not name or not country_code:
            continue
        suggestions.append(
            CitySuggestion(
                label=f"{name}, {country_code}",
                latitude=latitude,
                longitude=longitude,
            )
        )
    return suggestions
