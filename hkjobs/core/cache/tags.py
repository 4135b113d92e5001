from enum import Enum


class CacheTags(str, Enum):
    """
    Enum for cache tags used to categorize and manage cached data.
    """

    USER = "user"
    PROFILE = "profile"

    JOBS = "jobs"
    APPLICATIONS = "applications"
    INTERVIEWS = "interviews"
    DOCUMENTS = "documents"
    REMINDERS = "reminders"

    SCRAPING = "scraping"
