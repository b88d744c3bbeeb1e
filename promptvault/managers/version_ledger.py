"""
Version ledger for promptvault.

Decides when a content edit on a prompt becomes a new version, archives the
superseded content and builds the version list shown to users.
"""
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from promptvault.constants import VALIDATION_CONTENT_REQUIRED
from promptvault.exceptions import ValidationError
from promptvault.models.base import Prompt, VersionRecord


def _sorted_history(records: List[VersionRecord]) -> List[VersionRecord]:
    return sorted(records, key=lambda r: r.version_number, reverse=True)


def apply_edit(
    prompt: Prompt, new_content: str, now: Optional[datetime] = None
) -> Tuple[Prompt, Optional[VersionRecord]]:
    """Apply a content edit to a prompt.

    Exact-equal content is a no-op: the same prompt object comes back and no
    record is produced. Otherwise the current content is archived under the
    current version number, the counter advances by one and the new record
    is placed at the head of the history.

    The input prompt is never mutated.

    Args:
        prompt: Prompt being edited.
        new_content: Replacement text (non-empty).
        now: Timestamp to stamp the archive with. Defaults to datetime.now().

    Returns:
        Tuple of (updated prompt, archived record or None).

    Raises:
        ValidationError: If new_content is empty.
    """
    if not new_content:
        raise ValidationError(VALIDATION_CONTENT_REQUIRED)

    if new_content == prompt.content:
        return prompt, None

    now = now or datetime.now()
    archived = VersionRecord(
        version_number=prompt.version_number,
        content=prompt.content,
        timestamp=now,
    )
    updated = prompt.model_copy(
        update={
            "content": new_content,
            "version_number": prompt.version_number + 1,
            "updated_at": now,
            "history": _sorted_history([archived, *prompt.history]),
        }
    )
    return updated, archived


def list_versions(prompt: Prompt) -> List[VersionRecord]:
    """List every version of a prompt, current one first.

    The live content is merged in as a synthetic record flagged is_current.
    Duplicate version numbers collapse to one entry, with the current
    record winning.
    """
    by_number: Dict[int, VersionRecord] = {}
    for record in prompt.history:
        by_number[record.version_number] = record

    by_number[prompt.version_number] = VersionRecord(
        version_number=prompt.version_number,
        content=prompt.content,
        timestamp=prompt.updated_at,
        is_current=True,
    )
    return _sorted_history(list(by_number.values()))
