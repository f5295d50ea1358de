"""Read-only adapter over per-worker beads record stores."""

from town_doctor.beads.client import BeadsClient, RecordStore
from town_doctor.beads.models import (
    STATUS_IN_PROGRESS,
    STATUS_PINNED,
    AttachmentFields,
    Issue,
    parse_attachment_fields,
)

__all__ = [
    "AttachmentFields",
    "BeadsClient",
    "Issue",
    "RecordStore",
    "STATUS_IN_PROGRESS",
    "STATUS_PINNED",
    "parse_attachment_fields",
]
