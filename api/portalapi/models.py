"""
Portal API Models

Response shapes returned by the portal login endpoints. Older and newer
backend versions spell the token fields differently (camelCase vs
snake_case), so every field accepts both and falls back to the second
spelling when the first is null or empty.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator, model_validator

FIELD_SPELLINGS = {
    "access_token": ("accessToken", "access_token"),
    "refresh_token": ("refreshToken", "refresh_token"),
    "expires_in": ("expiresIn", "expires_in"),
}


class PortalLoginResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    expires_in: Optional[float] = None  # seconds

    @model_validator(mode="before")
    @classmethod
    def merge_spellings(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        merged = {}
        for name, (camel, snake) in FIELD_SPELLINGS.items():
            merged[name] = data.get(camel) or data.get(snake)
        return merged

    @field_validator("access_token", "refresh_token", "expires_in", mode="wrap")
    @classmethod
    def drop_unusable(cls, value: Any, handler):
        # An unusable value counts as absent; the client decides what absent means
        try:
            return handler(value)
        except ValidationError:
            return None
