"""Task model. Fully free-form; used for both create and partial update bodies."""

from campuspilot.models.base import OpenModel


class TaskIn(OpenModel):
    model_config = {
        "json_schema_extra": {
            "example": {"uid": "firebase-uid", "title": "Essay draft", "status": "todo"}
        }
    }
