"""
Case registry backed by the Supabase ``cases`` table.
Answers whether the current user already filed a case under a given name.
"""

import asyncio
from typing import Optional

from supabase import Client

from ..utils.config import settings
from ..utils.errors import CollaboratorError
from ..utils.logging import get_audit_logger, get_logger, monitor_latency
from .supabase_client import get_supabase_client

logger = get_logger(__name__)
audit_logger = get_audit_logger()


class SupabaseCaseRegistry:
    """Case-name lookups scoped to one user."""

    def __init__(
        self,
        user_id: str,
        client: Optional[Client] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.user_id = user_id
        self._client = client
        self._timeout = timeout_seconds or settings.registry_timeout_seconds

    @property
    def client(self) -> Client:
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    @monitor_latency("registry_case_name_exists", "supabase")
    async def case_name_exists(self, name: str) -> bool:
        """Whether this user already has a case called ``name``.

        Raises:
            CollaboratorError: the lookup failed or timed out.
        """
        query = (
            self.client.table(settings.cases_table)
            .select("id")
            .eq("case_name", name.strip())
            .eq("created_by", self.user_id)
            .limit(1)
        )
        try:
            result = await asyncio.wait_for(asyncio.to_thread(query.execute), self._timeout)
        except asyncio.TimeoutError as e:
            logger.error(f"Case name lookup timed out after {self._timeout}s")
            raise CollaboratorError("registry_case_name_exists", "timed out") from e
        except Exception as e:
            audit_logger.log_data_access(
                resource_type="case",
                resource_id="lookup",
                user_id=self.user_id,
                operation="read",
                success=False,
                error=str(e),
            )
            logger.error(f"Failed to check case name: {e}")
            raise CollaboratorError("registry_case_name_exists", str(e)) from e

        audit_logger.log_data_access(
            resource_type="case",
            resource_id="lookup",
            user_id=self.user_id,
            operation="read",
            success=True,
        )
        return bool(result.data)
