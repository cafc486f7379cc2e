"""Class record: a course on the student's timetable. Attributes are free-form."""

from typing import Optional

from campuspilot.models.base import OpenModel


class ClassIn(OpenModel):
    uid: Optional[str] = None  # Owner
