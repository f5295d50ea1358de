"""Record shapes consumed from a beads store.

``Issue`` mirrors the JSON emitted by ``bd list --json`` / ``bd show --json``;
only the fields the health checks need are declared and everything else is
ignored.  Attachment fields are not first-class columns: they live in the
description of a pinned issue as ``key: value`` lines::

    attached_molecule: gt-mol-42
    attached_at: 2025-01-02T15:04:05Z
    attached_args: --fast
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

STATUS_PINNED = "pinned"
STATUS_IN_PROGRESS = "in_progress"

__all__ = [
    "ATTACHMENT_KEYS",
    "AttachmentFields",
    "Issue",
    "STATUS_IN_PROGRESS",
    "STATUS_PINNED",
    "parse_attachment_fields",
]


class Issue(BaseModel):
    """A single record from a beads store."""

    model_config = ConfigDict(extra="ignore")

    id: str
    title: str = ""
    assignee: str = ""
    status: str = ""
    updated_at: str = Field(default="", description="Free-form timestamp string")
    description: str = ""

    @field_validator(
        "title", "assignee", "status", "updated_at", "description", mode="before"
    )
    @classmethod
    def _none_to_empty(cls, value: object) -> object:
        return "" if value is None else value


class AttachmentFields(BaseModel):
    """Attachment metadata carried by a pinned issue."""

    attached_molecule: str = ""
    attached_at: str = ""
    attached_args: str = ""


ATTACHMENT_KEYS = frozenset(AttachmentFields.model_fields)


def _normalize_key(key: str) -> str:
    return key.strip().lower().replace("-", "_").replace(" ", "_")


def parse_attachment_fields(issue: Issue) -> AttachmentFields | None:
    """Extract attachment fields from an issue description.

    Returns ``None`` when the description declares none of the attachment
    keys.  The first occurrence of a key wins.
    """
    if not issue.description:
        return None

    values: dict[str, str] = {}
    for line in issue.description.splitlines():
        key, sep, value = line.partition(":")
        if not sep:
            continue
        key = _normalize_key(key)
        if key in ATTACHMENT_KEYS and key not in values:
            values[key] = value.strip()

    if not values:
        return None
    return AttachmentFields(**values)
