from enum import StrEnum


class ProfileExportFormat(StrEnum):
    JSON = "json"
    PDF = "pdf"
