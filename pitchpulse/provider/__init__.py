"""Provider access: transport, competition whitelist and the domain envelope."""

from pitchpulse.provider.api_football import APIFootballClient
from pitchpulse.provider.base import FootballDataSource
from pitchpulse.provider.competitions import COMPETITIONS, LIVE_STATUSES, UPCOMING_STATUSES, Competition
from pitchpulse.provider.envelope import DomainEnvelope, EnvelopeKind

__all__ = [
    "APIFootballClient",
    "COMPETITIONS",
    "Competition",
    "DomainEnvelope",
    "EnvelopeKind",
    "FootballDataSource",
    "LIVE_STATUSES",
    "UPCOMING_STATUSES",
]
