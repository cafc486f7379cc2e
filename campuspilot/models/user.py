"""
User model.

Identity lives in Firebase; uid is the token subject. At most one user
document exists per uid, creation returns the existing record otherwise.
"""

from typing import Optional

from campuspilot.models.base import OpenModel


class UserIn(OpenModel):
    """Body of POST /api/users. Profile attributes beyond uid pass through."""

    uid: Optional[str] = None  # Firebase UID ("sub" claim)
    email: Optional[str] = None

    model_config = {
        "json_schema_extra": {
            "example": {
                "uid": "firebase-uid",
                "email": "student@example.com",
                "displayName": "Sam Student",
            }
        }
    }
