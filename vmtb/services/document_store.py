"""
Raw document content in the Supabase ``case-documents`` storage bucket.
Only file bytes live here; review state stays on the intake session.
"""

import asyncio
from typing import List, Optional, Protocol

from supabase import Client

from ..utils.config import settings
from ..utils.errors import CollaboratorError
from ..utils.logging import get_audit_logger, get_logger, monitor_latency
from .supabase_client import get_supabase_client

logger = get_logger(__name__)
audit_logger = get_audit_logger()


class DocumentStore(Protocol):
    async def add(
        self, session_id: str, document_id: str, file_name: str, content: bytes, content_type: str
    ) -> str: ...

    async def list(self, session_id: str) -> List[str]: ...

    async def remove(self, content_refs: List[str]) -> None: ...

    async def signed_url(self, content_ref: str) -> str: ...


def storage_path(user_id: str, session_id: str, document_id: str, file_name: str) -> str:
    """``{user}/{session}/{document}.{ext}``; files without an extension are stored as png."""
    extension = file_name.rsplit(".", 1)[-1].lower() if "." in file_name else "png"
    return f"{user_id}/{session_id}/{document_id}.{extension}"


class SupabaseDocumentStore:
    """Document bytes of one user's intake sessions."""

    def __init__(self, user_id: str, client: Optional[Client] = None):
        self.user_id = user_id
        self._client = client

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def _bucket(self):
        return self.client.storage.from_(settings.documents_bucket)

    async def _call(self, operation: str, audit_operation: str, resource_id: str, func, *args, **kwargs):
        try:
            result = await asyncio.to_thread(func, *args, **kwargs)
        except Exception as e:
            audit_logger.log_data_access(
                resource_type="document",
                resource_id=resource_id,
                user_id=self.user_id,
                operation=audit_operation,
                success=False,
                error=str(e),
            )
            logger.error(f"Failed to {audit_operation} document content {resource_id}: {e}")
            raise CollaboratorError(operation, str(e)) from e

        audit_logger.log_data_access(
            resource_type="document",
            resource_id=resource_id,
            user_id=self.user_id,
            operation=audit_operation,
            success=True,
        )
        return result

    @monitor_latency("store_add_document", "supabase")
    async def add(
        self, session_id: str, document_id: str, file_name: str, content: bytes, content_type: str
    ) -> str:
        """Upload the bytes and return the storage path used as content reference."""
        path = storage_path(self.user_id, session_id, document_id, file_name)
        await self._call(
            "store_add_document",
            "create",
            path,
            self._bucket().upload,
            path,
            content,
            file_options={"content-type": content_type, "upsert": "true"},
        )
        return path

    @monitor_latency("store_list_documents", "supabase")
    async def list(self, session_id: str) -> List[str]:
        """Content references stored for one session."""
        prefix = f"{self.user_id}/{session_id}"
        entries = await self._call(
            "store_list_documents", "read", prefix, self._bucket().list, prefix
        )
        return [f"{prefix}/{entry['name']}" for entry in entries or [] if entry.get("name")]

    @monitor_latency("store_remove_documents", "supabase")
    async def remove(self, content_refs: List[str]) -> None:
        if not content_refs:
            return
        await self._call(
            "store_remove_documents",
            "delete",
            ",".join(content_refs),
            self._bucket().remove,
            list(content_refs),
        )

    @monitor_latency("store_sign_document", "supabase")
    async def signed_url(self, content_ref: str) -> str:
        result = await self._call(
            "store_sign_document",
            "read",
            content_ref,
            self._bucket().create_signed_url,
            content_ref,
            settings.signed_url_ttl_seconds,
        )
        url = result.get("signedURL") or result.get("signedUrl")
        if not url:
            raise CollaboratorError("store_sign_document", "no signed URL returned")
        return url
