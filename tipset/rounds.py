"""Round data from the Svenska Spel draw API.

Parses the current draw of a pool product into Event models plus the
turnover used as pool size. Nothing in the estimator or optimizer
depends on this module; it only feeds them.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Optional

import httpx

from tipset.models import Event, MalformedEvent, RoundDataError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.spela.svenskaspel.se/draw/1"

# Product key -> API path segment
PRODUCTS = {
    "europatipset": "europatipset",
    "stryktipset": "stryktipset",
    "topptipset": "topptipsetfamily",
}

# Leading integer of an amount string such as "12500000,00"
_LEADING_INT = re.compile(r"\s*[-+]?\d+")

# Products paying 40% of the net pot to the top tier
TOP_TIER_PRODUCTS = {"Stryktipset", "Europatipset"}


def product_url(product: str, base_url: str = DEFAULT_BASE_URL) -> str:
    key = product.lower()
    if key not in PRODUCTS:
        raise RoundDataError(
            f"Unknown product {product!r}; expected one of {sorted(PRODUCTS)}"
        )
    return f"{base_url.rstrip('/')}/{PRODUCTS[key]}/draws/"


@dataclass
class Round:
    """One open draw: its events and turnover."""

    product_name: str
    draw_number: int | None
    turnover: int
    events: list[Event] = field(default_factory=list)
    jackpot: float = 0.0

    @property
    def is_top_tier_product(self) -> bool:
        return self.product_name in TOP_TIER_PRODUCTS

    @property
    def net_pot(self) -> float:
        """Turnover after the operator's share and tax."""
        if self.is_top_tier_product:
            return self.turnover * 0.65 * (1 - 0.08)
        return self.turnover * 0.725 * (1 - 0.25)

    @property
    def payout(self) -> float:
        """Amount paid to the top tier (all rows correct)."""
        if self.is_top_tier_product:
            return self.net_pot * 0.40 + self.jackpot
        return self.net_pot + self.jackpot


def _percent_triplet(block: dict, event_number: Any) -> tuple[float, float, float]:
    """Read {"one", "x", "two"} percentages as fractions."""
    try:
        return (
            float(block["one"]) / 100,
            float(block["x"]) / 100,
            float(block["two"]) / 100,
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RoundDataError(f"Event {event_number}: bad percentage block {block!r}") from e


def parse_event(raw: dict, index: int) -> Event:
    """Build an Event from one drawEvents entry.

    Odds-implied probabilities come from favouriteOdds, falling back to the
    public shares (svenskaFolket) when the provider has no odds yet.
    """
    event_number = raw.get("eventNumber", index + 1)
    folk = raw.get("svenskaFolket")
    if not folk:
        raise RoundDataError(f"Event {event_number} has no svenskaFolket shares")

    shares = _percent_triplet(folk, event_number)
    odds = raw.get("favouriteOdds")
    probabilities = _percent_triplet(odds, event_number) if odds else shares

    event = Event(
        index=int(event_number),
        description=raw.get("eventDescription", ""),
        probabilities=probabilities,
        shares=shares,
    )
    try:
        event.validate()
    except MalformedEvent as e:
        raise RoundDataError(str(e)) from e
    return event


def parse_turnover(value: Any) -> int:
    """Leading integer of the net sale amount, so "12500000,00" gives 12500000."""
    if value is None or value == "":
        return 0
    if isinstance(value, (int, float)):
        return int(value)
    match = _LEADING_INT.match(str(value))
    if not match:
        raise RoundDataError(f"Bad turnover {value!r}")
    return int(match.group())


def parse_draw(data: dict) -> Round:
    """Parse a draws API response into the current Round."""
    if not isinstance(data, dict):
        raise RoundDataError(f"Expected a JSON object, got {type(data).__name__}")
    draws = data.get("draws") or []
    if not draws:
        raise RoundDataError("Response contains no draws")

    current = draws[0]
    raw_events = current.get("drawEvents") or []
    if not raw_events:
        raise RoundDataError("Current draw has no events")

    turnover = parse_turnover(current.get("currentNetSale"))

    events = [parse_event(raw, i) for i, raw in enumerate(raw_events)]
    draw = Round(
        product_name=current.get("productName", ""),
        draw_number=current.get("drawNumber"),
        turnover=turnover,
        events=events,
    )
    logger.info(
        f"Parsed {draw.product_name} draw {draw.draw_number}: "
        f"{len(events)} events, turnover {turnover}"
    )
    return draw


class RoundClient:
    """Async client for the draw API."""

    DEFAULT_HEADERS = {
        "Accept": "application/json",
    }

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url
        self.timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                headers=self.DEFAULT_HEADERS,
                timeout=self.timeout,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "RoundClient":
        return self

    async def __aexit__(self, *exc) -> None:
        await self.close()

    async def fetch_json(self, product: str) -> dict:
        url = product_url(product, self.base_url)
        try:
            logger.info(f"Fetching: {url}")
            response = await self.client.get(url)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"HTTP error fetching {url}: {e}")
            raise RoundDataError(f"HTTP {e.response.status_code}: {url}")
        except httpx.RequestError as e:
            logger.error(f"Request error fetching {url}: {e}")
            raise RoundDataError(f"Request failed: {url}")
        except ValueError as e:
            raise RoundDataError(f"Invalid JSON from {url}") from e

    async def fetch_round(self, product: str) -> Round:
        return parse_draw(await self.fetch_json(product))

    async def has_open_draw(self, product: str) -> bool:
        """True when the product's first draw has at least one event."""
        try:
            data = await self.fetch_json(product)
        except RoundDataError as e:
            logger.warning(f"Draw check failed for {product}: {e}")
            return False
        if not isinstance(data, dict):
            logger.warning(f"Draw check for {product}: unexpected payload {type(data).__name__}")
            return False
        draws = data.get("draws") or []
        return bool(draws and isinstance(draws[0], dict) and draws[0].get("drawEvents"))
