"""
Token schemas.

Claim shape carried by the bearer tokens issued at login/registration.
"""

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Decoded and verified bearer token claims."""
    user_id: int = Field(..., alias="userId")
    email: str
    iat: int
    exp: int

    class Config:
        populate_by_name = True
