from datetime import datetime

from hkjobs.core.schemas import Base, RequestModel
from hkjobs.documents.enums import DocumentType


class ApplicationDocument(Base):
    id: str
    application_id: str | None = None
    name: str
    type: DocumentType
    url: str
    size: int | None = None
    mime_type: str | None = None
    uploaded_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class DocumentFilters(RequestModel):
    type: DocumentType | None = None
    application_id: str | None = None
    date_from: str | None = None
    date_to: str | None = None


class UpdateDocumentRequest(RequestModel):
    name: str | None = None
    type: DocumentType | None = None


class DocumentTemplate(Base):
    id: str
    name: str
    description: str | None = None
    content: str
    type: DocumentType


class ExperienceEntry(Base):
    company: str
    position: str
    duration: str


class EducationEntry(Base):
    institution: str
    degree: str
    year: str


class ExtractedData(Base):
    email: str | None = None
    phone: str | None = None
    skills: list[str] = []
    experience: list[ExperienceEntry] = []
    education: list[EducationEntry] = []


class DocumentScan(Base):
    text: str = ""
    extracted_data: ExtractedData = ExtractedData()


class DocumentValidation(Base):
    valid: bool
    errors: list[str] = []
    warnings: list[str] = []


class StorageUsage(Base):
    used: int
    limit: int
    percentage: float


class DownloadUrl(Base):
    url: str
