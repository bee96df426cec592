"""
Pydantic schemas for venue and event reviews.

Reviews are an append‑only sub‑collection of venues and events.  Any
authenticated user may add one; ratings are stored as given (there is
no 1–5 range check and no one‑review‑per‑user rule).
"""

from typing import Optional

from pydantic import field_validator

from .common import CamelModel, UserName


class ReviewCreate(CamelModel):
    """Schema for adding a review."""

    rating: float
    comment: Optional[str] = None

    @field_validator("comment")
    @classmethod
    def sanitize_comment(cls, v: Optional[str]) -> Optional[str]:
        """Trim whitespace from the comment and enforce a maximum length."""
        if v is None:
            return None
        v = v.strip()
        if len(v) > 1000:
            raise ValueError("Comment must be 1000 characters or fewer")
        return v


class ReviewRead(CamelModel):
    """A review with its author projected to ``{id, name}``."""

    id: int
    user: Optional[UserName] = None
    rating: float
    comment: Optional[str] = None
    created_at: Optional[str] = None
