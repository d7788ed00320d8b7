"""Global constants for the fellowship application."""

# Collection names
USERS_COLLECTION = "users"
GRIDS_COLLECTION = "grids"
GROUPS_COLLECTION = "groups"
COURSES_COLLECTION = "courses"
SERVICE_AREAS_COLLECTION = "services"
ACTIVITIES_COLLECTION = "activities"
ACTIVITY_RESPONSES_COLLECTION = "activityResponses"
ATTENDANCE_COLLECTION = "attendanceRecords"

# User roles
ROLE_PASTOR = "Pastor"
ROLE_MEMBER = "Member"
ROLES = (ROLE_PASTOR, ROLE_MEMBER)

# User genders
GENDER_MALE = "Male"
GENDER_FEMALE = "Female"
GENDERS = (GENDER_MALE, GENDER_FEMALE)

# Activity response statuses
RESPONSE_CONFIRMED = "confirmed"
RESPONSE_PENDING = "pending"
RESPONSE_DENIED = "denied"
RESPONSE_STATUSES = (RESPONSE_CONFIRMED, RESPONSE_PENDING, RESPONSE_DENIED)

# Attendance record types
ATTENDANCE_NEWCOMERS = "newcomers"
ATTENDANCE_SERVICE = "attendance"
ATTENDANCE_RESET = "reset"
ATTENDANCE_CONFERENCE = "conference"
ATTENDANCE_TYPES = (
    ATTENDANCE_NEWCOMERS,
    ATTENDANCE_SERVICE,
    ATTENDANCE_RESET,
    ATTENDANCE_CONFERENCE,
)
# Types tied to a weekend service, and types that record the leader's own presence
SERVICE_ATTENDANCE_TYPES = (ATTENDANCE_NEWCOMERS, ATTENDANCE_SERVICE)
PRESENCE_ATTENDANCE_TYPES = (ATTENDANCE_SERVICE, ATTENDANCE_CONFERENCE)

# Weekend services, in schedule order
CHURCH_SERVICES = {
    "saturday-1": "Saturday NEXT 5PM",
    "saturday-2": "Saturday NEXT 7PM",
    "sunday-1": "Sunday 9AM",
    "sunday-2": "Sunday 11:30AM",
}

# Search
SEARCH_MIN_TERM_LENGTH = 2
SEARCH_RESULT_LIMIT = 10

# Groups
MAX_GROUP_LEADERS = 2
INVITATION_CODE_LENGTH = 6
INVITATION_CODE_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
INVITATION_CODE_ATTEMPTS = 5
LEADER_CHAIN_MAX_HOPS = 50

# Activities
ACTIVITY_NAME_MIN_LENGTH = 2
ACTIVITY_ADDRESS_MIN_LENGTH = 5
ACTIVITY_DESCRIPTION_MIN_LENGTH = 10

# Service areas
SERVICE_AREA_NAME_MIN_LENGTH = 2

# Statistics
POPULAR_COURSES_LIMIT = 10
UNKNOWN_COURSE_NAME = "Unknown course"
AGE_RANGES = ("-13", "13-17", "18-25", "26-35", "36-45", "46-55", "56+")
PERIOD_TYPES = ("week", "month", "quarter", "year")
DEFAULT_PERIOD_TYPE = "month"
# Months charted by the attendance trend for each period type
TREND_MONTHS = {"week": 1, "month": 6, "quarter": 4, "year": 12}

# Firestore "in"/batch read chunking
FIRESTORE_BATCH_LIMIT = 30
