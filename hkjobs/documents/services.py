from typing import Any

from hkjobs.core.cache.tags import CacheTags
from hkjobs.core.pagination import DEFAULT_PAGE_SIZE, PaginatedResponse
from hkjobs.core.services import BaseService, FileUpload
from hkjobs.documents.enums import DocumentType
from hkjobs.documents.schemas import (
    ApplicationDocument,
    DocumentFilters,
    DocumentScan,
    DocumentTemplate,
    DocumentValidation,
    DownloadUrl,
    StorageUsage,
    UpdateDocumentRequest,
)
from loggers import get_logger

logger = get_logger(__name__)

Filters = DocumentFilters | dict[str, Any] | None


def _filter_params(filters: Filters) -> dict[str, Any]:
    if filters is None:
        return {}
    return DocumentFilters.model_validate(filters).to_payload()


class DocumentsService(BaseService):
    # Documents are embedded in applications.
    tags = (CacheTags.DOCUMENTS, CacheTags.APPLICATIONS)

    async def get_documents(
        self, filters: Filters = None, page: int = 1, limit: int = DEFAULT_PAGE_SIZE
    ) -> PaginatedResponse[ApplicationDocument]:
        params = {**_filter_params(filters), **self.page_params(page, limit)}
        data = await self._get("/documents", params=params)
        return PaginatedResponse[ApplicationDocument].model_validate(data)

    async def get_document(self, document_id: str) -> ApplicationDocument:
        return ApplicationDocument.model_validate(
            await self._get(f"/documents/{document_id}")
        )

    async def upload_document(
        self,
        application_id: str,
        file: FileUpload,
        type: DocumentType | str,
    ) -> ApplicationDocument:
        """Upload one file as multipart form data; the document takes the file's name."""
        form = {
            "applicationId": application_id,
            "type": DocumentType(type).value,
            "name": file[0],
        }
        payload = await self._post("/documents/upload", data=form, files={"file": file})
        document = ApplicationDocument.model_validate(payload)
        logger.info(
            "[DocumentsService] Uploaded %s (%s bytes) to application %s",
            document.name,
            document.size,
            application_id,
        )
        return document

    async def bulk_upload(
        self,
        application_id: str,
        files: list[FileUpload],
        type: DocumentType | str,
    ) -> list[ApplicationDocument]:
        if not files:
            raise ValueError("At least one file is required")
        form = {"applicationId": application_id, "type": DocumentType(type).value}
        payload = await self._post(
            "/documents/bulk-upload",
            data=form,
            files=[("files", file) for file in files],
        )
        return self.validate(list[ApplicationDocument], payload)

    async def update_document(
        self, document_id: str, data: UpdateDocumentRequest | dict[str, Any]
    ) -> ApplicationDocument:
        body = UpdateDocumentRequest.model_validate(data)
        payload = await self._patch(f"/documents/{document_id}", json=body.to_payload())
        return ApplicationDocument.model_validate(payload)

    async def delete_document(self, document_id: str) -> None:
        await self._delete(f"/documents/{document_id}")

    async def get_download_url(self, document_id: str) -> str:
        # Signed URLs expire; always ask the backend.
        data = await self._get(f"/documents/{document_id}/download-url", cached=False)
        return DownloadUrl.model_validate(data).url

    async def download_document(self, document_id: str) -> bytes:
        return await self._get_bytes(f"/documents/{document_id}/download")

    async def get_templates(self, type: DocumentType | str) -> list[DocumentTemplate]:
        data = await self._get("/documents/templates", params={"type": DocumentType(type)})
        return self.validate(list[DocumentTemplate], data)

    async def scan_document(self, document_id: str) -> DocumentScan:
        payload = await self._post(f"/documents/{document_id}/scan", invalidate=())
        return DocumentScan.model_validate(payload)

    async def validate_document(
        self, file: FileUpload, type: DocumentType | str
    ) -> DocumentValidation:
        payload = await self._post(
            "/documents/validate",
            data={"type": DocumentType(type).value},
            files={"file": file},
            invalidate=(),
        )
        return DocumentValidation.model_validate(payload)

    async def get_storage_usage(self) -> StorageUsage:
        return StorageUsage.model_validate(await self._get("/documents/storage"))
