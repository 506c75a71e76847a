"""Constants and defaults.

Note: Keep constants here to avoid magic strings spread across code.
"""

STUDENTS_KEY = "students"
CLASSES_KEY = "classes"
ATTENDANCE_KEY = "attendance"

DEFAULT_SESSION_HOURS = 8
DEFAULT_DATA_DIR = "data"

CSV_HEADERS = (
    "Student Name",
    "Total Hours Present",
    "Total Hours Absent",
    "Total Hours",
    "Presence %",
    "Absence %",
)
CSV_SUMMARY_LABEL = "Class Average"
