"""Collaborator services of the VMTB core."""

from vmtb.services.case_registry import SupabaseCaseRegistry
from vmtb.services.document_store import DocumentStore, SupabaseDocumentStore
from vmtb.services.meeting_service import MeetingService
from vmtb.services.meeting_store import MeetingStore, SupabaseMeetingStore
from vmtb.services.notifier import (
    AttentionNotifier,
    AttentionSignal,
    LoggingAttentionNotifier,
    RecordingAttentionNotifier,
)
from vmtb.services.supabase_client import get_supabase_client

__all__ = [
    "SupabaseCaseRegistry",
    "DocumentStore",
    "SupabaseDocumentStore",
    "MeetingService",
    "MeetingStore",
    "SupabaseMeetingStore",
    "AttentionNotifier",
    "AttentionSignal",
    "LoggingAttentionNotifier",
    "RecordingAttentionNotifier",
    "get_supabase_client",
]
