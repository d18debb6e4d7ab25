from models.course import Course, CourseType
from models.assessment import Assessment
from models.mark import Mark
from models.student import Student
from models.attendance import AttendanceSummary
from models.course_data import CourseData

__all__ = [
    "Course",
    "CourseType",
    "Assessment",
    "Mark",
    "Student",
    "AttendanceSummary",
    "CourseData",
]
