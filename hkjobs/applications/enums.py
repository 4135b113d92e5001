from enum import StrEnum


class ApplicationStatus(StrEnum):
    DRAFT = "DRAFT"
    APPLIED = "APPLIED"
    REVIEWING = "REVIEWING"
    INTERVIEW_SCHEDULED = "INTERVIEW_SCHEDULED"
    INTERVIEWED = "INTERVIEWED"
    OFFER_RECEIVED = "OFFER_RECEIVED"
    ACCEPTED = "ACCEPTED"
    REJECTED = "REJECTED"
    WITHDRAWN = "WITHDRAWN"

    @classmethod
    def values(cls) -> set[str]:
        return {item.value for item in cls.__members__.values()}


class TimelineEventType(StrEnum):
    STATUS_CHANGE = "status_change"
    INTERVIEW = "interview"
    NOTE = "note"
    DOCUMENT = "document"


class TemplateType(StrEnum):
    COVER_LETTER = "cover_letter"
    FOLLOW_UP = "follow_up"
