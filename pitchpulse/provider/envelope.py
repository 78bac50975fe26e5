"""Raw domain envelope: the Present / Absent / Malformed wrapper.

Normalizers never see exceptions or half-parsed bodies. The orchestrator
wraps whatever came back for a domain into one of three variants and the
normalizer branches on the variant before touching the payload.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional


class EnvelopeKind(str, Enum):
    PRESENT = "present"
    ABSENT = "absent"
    MALFORMED = "malformed"


@dataclass(frozen=True)
class DomainEnvelope:
    kind: EnvelopeKind
    payload: Optional[dict] = None
    reason: Optional[str] = None

    @classmethod
    def present(cls, payload: dict) -> "DomainEnvelope":
        return cls(kind=EnvelopeKind.PRESENT, payload=payload)

    @classmethod
    def absent(cls, reason: str = "no_data") -> "DomainEnvelope":
        return cls(kind=EnvelopeKind.ABSENT, reason=reason)

    @classmethod
    def malformed(cls, reason: str) -> "DomainEnvelope":
        return cls(kind=EnvelopeKind.MALFORMED, reason=reason)

    @classmethod
    def wrap(cls, payload: Any) -> "DomainEnvelope":
        """Classify a decoded provider body.

        Anything that is not a JSON object, or that carries provider-level
        `errors`, is malformed. An object without a usable `response` is
        absent (the provider simply has no data).
        """
        if not isinstance(payload, dict):
            return cls.malformed(f"unexpected payload type {type(payload).__name__}")
        errors = payload.get("errors")
        if errors:
            return cls.malformed(f"provider errors: {errors}")
        response = payload.get("response")
        if response is None or response == [] or response == {}:
            return cls.absent()
        return cls.present(payload)

    @property
    def is_present(self) -> bool:
        return self.kind == EnvelopeKind.PRESENT

    def response(self) -> Any:
        """The provider `response` member, or None unless present."""
        if not self.is_present or not isinstance(self.payload, dict):
            return None
        return self.payload.get("response")

    def response_list(self) -> list:
        """The `response` member when it is a list, else an empty list."""
        response = self.response()
        return response if isinstance(response, list) else []

    def response_object(self) -> Optional[dict]:
        """The `response` member when it is an object, else None."""
        response = self.response()
        return response if isinstance(response, dict) else None

