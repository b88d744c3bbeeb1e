"""
Bulk import and export of prompts.

Import accepts a JSON array or a CSV file with a header row. Export writes
every prompt of a vault as JSON or CSV.
"""
import csv
import io
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Optional

from promptvault.constants import EXPORT_CSV_HEADERS, EXPORT_FORMATS
from promptvault.exceptions import ImportFormatError
from promptvault.models.base import Prompt

logger = logging.getLogger(__name__)


@dataclass
class ImportedPrompt:
    """One prompt parsed from an import file."""

    name: str
    content: str
    folder_id: Optional[str] = None
    is_favorite: bool = False


def detect_format(filename: str) -> str:
    """Return 'json' or 'csv' from a file name's extension."""
    suffix = Path(filename).suffix.lower().lstrip(".")
    if suffix not in EXPORT_FORMATS:
        raise ImportFormatError("Unsupported file type. Please use JSON or CSV.")
    return suffix


def _as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() == "true"


def parse_json(text: str) -> List[ImportedPrompt]:
    """Parse a JSON array of prompt objects.

    Each object needs string 'name' and 'content'; 'folderId'/'folder_id'
    and 'isFavorite'/'is_favorite' are optional.

    Raises:
        ImportFormatError: If the text is not a JSON array of valid prompts.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ImportFormatError(f"Invalid JSON format: {e}")

    if not isinstance(data, list):
        raise ImportFormatError("Invalid JSON format: Expected an array of prompts.")

    prompts = []
    for index, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ImportFormatError(f"Invalid prompt data at index {index}: expected an object.")
        name = entry.get("name")
        content = entry.get("content")
        if not isinstance(name, str) or not name.strip() or not isinstance(content, str) or not content:
            raise ImportFormatError(
                f"Invalid prompt data at index {index}: "
                "'name' and 'content' are required and must be strings."
            )
        folder_id = entry.get("folderId", entry.get("folder_id"))
        prompts.append(
            ImportedPrompt(
                name=name,
                content=content,
                folder_id=folder_id or None,
                is_favorite=_as_bool(entry.get("isFavorite", entry.get("is_favorite", False))),
            )
        )
    return prompts


def parse_csv(text: str) -> List[ImportedPrompt]:
    """Parse CSV text with a header row.

    'name' and 'content' columns are required (case-insensitive); 'folderid'
    and 'isfavorite' are optional. Rows missing a name or content are skipped.

    Raises:
        ImportFormatError: If the header or data rows are missing.
    """
    rows = list(csv.reader(io.StringIO(text)))
    rows = [row for row in rows if any(cell.strip() for cell in row)]
    if len(rows) < 2:
        raise ImportFormatError("CSV file must have a header and at least one data row.")

    header = [h.strip().lower() for h in rows[0]]
    if "name" not in header or "content" not in header:
        raise ImportFormatError('CSV file must contain "name" and "content" columns.')

    name_index = header.index("name")
    content_index = header.index("content")
    folder_index = header.index("folderid") if "folderid" in header else None
    favorite_index = header.index("isfavorite") if "isfavorite" in header else None

    def _cell(row: List[str], index: Optional[int]) -> str:
        if index is None or index >= len(row):
            return ""
        return row[index].strip()

    prompts = []
    for line_number, row in enumerate(rows[1:], start=2):
        name = _cell(row, name_index)
        content = _cell(row, content_index)
        if not name or not content:
            logger.warning("Skipping row %d due to missing name or content.", line_number)
            continue
        prompts.append(
            ImportedPrompt(
                name=name,
                content=content,
                folder_id=_cell(row, folder_index) or None,
                is_favorite=_as_bool(_cell(row, favorite_index)),
            )
        )
    return prompts


def parse_file(path: Path) -> List[ImportedPrompt]:
    """Parse an import file, choosing the format by extension."""
    fmt = detect_format(path.name)
    try:
        text = Path(path).read_text(encoding="utf-8")
    except UnicodeDecodeError:
        raise ImportFormatError("File is not valid UTF-8 text.")
    return parse_json(text) if fmt == "json" else parse_csv(text)


def _export_row(prompt: Prompt, user_id: str) -> dict:
    return {
        "id": prompt.id,
        "name": prompt.name,
        "content": prompt.content,
        "folderId": prompt.parent_id,
        "isFavorite": prompt.is_favorite,
        "versions": prompt.version_number,
        "createdAt": prompt.created_at.isoformat(),
        "updatedAt": prompt.updated_at.isoformat(),
        "userId": user_id,
    }


def export_json(prompts: Iterable[Prompt], user_id: str) -> str:
    """Serialize prompts to a JSON array."""
    return json.dumps([_export_row(p, user_id) for p in prompts], indent=2)


def export_csv(prompts: Iterable[Prompt], user_id: str) -> str:
    """Serialize prompts to CSV with a header row.

    Returns an empty string when there are no prompts.
    """
    rows = [_export_row(p, user_id) for p in prompts]
    if not rows:
        return ""

    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=EXPORT_CSV_HEADERS, lineterminator="\n")
    writer.writeheader()
    for row in rows:
        row["folderId"] = row["folderId"] or ""
        row["isFavorite"] = str(row["isFavorite"]).lower()
        writer.writerow(row)
    return buffer.getvalue()
