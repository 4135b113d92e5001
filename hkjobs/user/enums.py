from enum import StrEnum


class UserRole(StrEnum):
    USER = "USER"  # Job seeker
    EMPLOYER = "EMPLOYER"
    ADMIN = "ADMIN"
    MODERATOR = "MODERATOR"

    @classmethod
    def values(cls) -> set[str]:
        return {item.value for item in cls.__members__.values()}
