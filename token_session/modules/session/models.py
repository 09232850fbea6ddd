"""
Session envelope models.

These models define the shape of every value handed to a session store.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ...errors import StoreError


class EnvelopeMetadata(BaseModel):
    """Compatibility metadata. ``maxAge`` is 0 unless a TTL override is active."""

    model_config = ConfigDict(populate_by_name=True)

    max_age: int = Field(default=0, alias="maxAge", description="Override TTL in seconds, else 0")


class SessionEnvelope(BaseModel):
    """Backend-boundary wrapper around a session payload."""

    metadata: EnvelopeMetadata = Field(default_factory=EnvelopeMetadata)
    data: Dict[str, Any] = Field(default_factory=dict, description="Session payload")

    @classmethod
    def wrap(cls, payload: Dict[str, Any], ttl: Optional[int] = None) -> "SessionEnvelope":
        if not isinstance(payload, dict):
            raise TypeError(f"session payload must be a dict, got {type(payload).__name__}")
        return cls(metadata=EnvelopeMetadata(max_age=ttl or 0), data=payload)

    @classmethod
    def from_store(cls, sid: str, raw: Dict[str, Any]) -> "SessionEnvelope":
        """
        Parse a value returned by a store.

        Raises:
            StoreError: If the value is not a well-formed envelope
        """
        try:
            return cls.model_validate(raw)
        except ValidationError as e:
            raise StoreError(f"Malformed session envelope for {sid}: {e}", sid=sid) from e

    def to_store(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)
