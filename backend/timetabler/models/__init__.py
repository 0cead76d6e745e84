from timetabler.models.calendar_config import CalendarConfig  # noqa: F401
from timetabler.models.department import Department  # noqa: F401
from timetabler.models.division import Division  # noqa: F401
from timetabler.models.faculty import Faculty, faculty_subjects  # noqa: F401
from timetabler.models.room import Room, RoomType  # noqa: F401
from timetabler.models.semester import Semester  # noqa: F401
from timetabler.models.subject import Subject  # noqa: F401
from timetabler.models.timetable import TimetableEntry  # noqa: F401
