"""PitchPulse: football match intelligence over API-Football."""

__version__ = "0.1.0"
