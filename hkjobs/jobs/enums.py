from enum import StrEnum


class DatePosted(StrEnum):
    TODAY = "today"
    WEEK = "week"
    MONTH = "month"
    ALL = "all"


class JobSortBy(StrEnum):
    DATE = "date"
    SALARY = "salary"
    RELEVANCE = "relevance"


class Trend(StrEnum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"
