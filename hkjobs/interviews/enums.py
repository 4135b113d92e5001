from enum import StrEnum


class InterviewType(StrEnum):
    PHONE_SCREENING = "PHONE_SCREENING"
    TECHNICAL = "TECHNICAL"
    BEHAVIORAL = "BEHAVIORAL"
    ONSITE = "ONSITE"
    PANEL = "PANEL"
    FINAL = "FINAL"


class InterviewStatus(StrEnum):
    SCHEDULED = "SCHEDULED"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"
    RESCHEDULED = "RESCHEDULED"
    NO_SHOW = "NO_SHOW"


class InterviewOutcome(StrEnum):
    PASSED = "passed"
    FAILED = "failed"
    PENDING = "pending"


class CalendarFormat(StrEnum):
    ICS = "ics"
    GOOGLE = "google"
