"""Normalizers for provider predictions and bookmaker odds."""

import logging
from typing import Optional

from pitchpulse.models import (
    BttsOdds,
    MatchWinnerOdds,
    OddsSnapshot,
    OverUnderOdds,
    PredictedWinner,
    PredictionPercent,
    Predictions,
)
from pitchpulse.normalizers._access import as_dict, as_list, as_str, dig, safe_int
from pitchpulse.provider.envelope import DomainEnvelope

logger = logging.getLogger(__name__)

# Major bookmakers first, most liquid markets
PRIORITY_BOOKMAKERS = [
    "Bet365",
    "Pinnacle",
    "1xBet",
    "Unibet",
    "William Hill",
    "Betfair",
    "Bwin",
    "888sport",
]


def normalize_predictions(envelope: DomainEnvelope) -> Optional[Predictions]:
    block = dig(envelope.response_list(), 0, "predictions")
    if not isinstance(block, dict):
        return None

    winner = None
    raw_winner = as_dict(block.get("winner"))
    if raw_winner.get("name"):
        winner = PredictedWinner(
            id=safe_int(raw_winner.get("id")),
            name=raw_winner["name"],
            comment=raw_winner.get("comment"),
        )

    percent = None
    raw_percent = block.get("percent")
    if isinstance(raw_percent, dict):
        percent = PredictionPercent(
            home=as_str(raw_percent.get("home")),
            draw=as_str(raw_percent.get("draw")),
            away=as_str(raw_percent.get("away")),
        )

    win_or_draw = block.get("win_or_draw")
    return Predictions(
        winner=winner,
        win_or_draw=win_or_draw if isinstance(win_or_draw, bool) else None,
        under_over=as_str(block.get("under_over")),
        goals_home=as_str(dig(block, "goals", "home")),
        goals_away=as_str(dig(block, "goals", "away")),
        advice=as_str(block.get("advice")),
        percent=percent,
    )


def _select_bookmaker(bookmakers: list[dict]) -> Optional[dict]:
    for priority_book in PRIORITY_BOOKMAKERS:
        for bookmaker in bookmakers:
            if str(bookmaker.get("name", "")).lower() == priority_book.lower():
                return bookmaker
    return bookmakers[0] if bookmakers else None


def _price(values: list, label: str) -> Optional[str]:
    for v in values:
        if isinstance(v, dict) and v.get("value") == label:
            return as_str(v.get("odd"))
    return None


def normalize_odds(envelope: DomainEnvelope) -> Optional[OddsSnapshot]:
    """Match Winner, Over/Under 2.5 and BTTS prices from one bookmaker."""
    bookmakers = [
        b
        for entry in envelope.response_list()
        for b in as_list(dig(entry, "bookmakers"))
        if isinstance(b, dict)
    ]
    bookmaker = _select_bookmaker(bookmakers)
    if bookmaker is None:
        return None

    match_winner = over_under = btts = None
    for bet in as_list(bookmaker.get("bets")):
        if not isinstance(bet, dict):
            continue
        values = as_list(bet.get("values"))
        name = bet.get("name")
        if name == "Match Winner":
            match_winner = MatchWinnerOdds(
                home=_price(values, "Home"),
                draw=_price(values, "Draw"),
                away=_price(values, "Away"),
            )
        elif name == "Goals Over/Under":
            over_under = OverUnderOdds(
                over_25=_price(values, "Over 2.5"),
                under_25=_price(values, "Under 2.5"),
            )
        elif name == "Both Teams Score":
            btts = BttsOdds(yes=_price(values, "Yes"), no=_price(values, "No"))

    bookmaker_name = str(bookmaker.get("name") or "Unknown")
    logger.debug(f"Using odds from {bookmaker_name}")
    return OddsSnapshot(
        bookmaker=bookmaker_name,
        match_winner=match_winner,
        over_under=over_under,
        btts=btts,
    )
