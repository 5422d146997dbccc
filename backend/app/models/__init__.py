from app.models.class_session import ClassSession, ClassSessionGroup  # noqa: F401
from app.models.group import StudentGroup  # noqa: F401
from app.models.room import Room  # noqa: F401
from app.models.subject import ActivityType, Subject, SubjectGroup  # noqa: F401
from app.models.teacher import PreferenceLevel, Teacher  # noqa: F401
from app.models.timetable import Timetable  # noqa: F401
