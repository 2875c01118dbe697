"""Shared test fixtures for tipset."""

import pytest

from tipset.models import Event


@pytest.fixture
def sample_events() -> list[Event]:
    """Four events with distinct favourites and non-degenerate shares."""
    return [
        Event(1, "Arsenal-Chelsea", (0.50, 0.30, 0.20), (0.40, 0.35, 0.25)),
        Event(2, "Leeds-Everton", (0.25, 0.30, 0.45), (0.30, 0.30, 0.40)),
        Event(3, "Brighton-Fulham", (0.35, 0.40, 0.25), (0.45, 0.30, 0.25)),
        Event(4, "Wolves-Burnley", (0.60, 0.25, 0.15), (0.70, 0.20, 0.10)),
    ]


@pytest.fixture
def single_event() -> list[Event]:
    return [Event(1, "Home-Away", (0.5, 0.3, 0.2), (0.4, 0.35, 0.25))]


@pytest.fixture
def sample_draws_response() -> dict:
    """Draws API response with one open Stryktipset draw."""
    return {
        "draws": [
            {
                "productName": "Stryktipset",
                "drawNumber": 4821,
                "currentNetSale": "12500000",
                "drawEvents": [
                    {
                        "eventNumber": 1,
                        "eventDescription": "Arsenal - Chelsea",
                        "favouriteOdds": {"one": "50", "x": "30", "two": "20"},
                        "svenskaFolket": {"one": "40", "x": "35", "two": "25"},
                    },
                    {
                        "eventNumber": 2,
                        "eventDescription": "Leeds - Everton",
                        "favouriteOdds": {"one": "25", "x": "30", "two": "45"},
                        "svenskaFolket": {"one": "30", "x": "30", "two": "40"},
                    },
                    {
                        "eventNumber": 3,
                        "eventDescription": "Brighton - Fulham",
                        "favouriteOdds": None,
                        "svenskaFolket": {"one": "45", "x": "30", "two": "25"},
                    },
                ],
            }
        ]
    }
