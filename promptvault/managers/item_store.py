"""
Hierarchical item store for promptvault.

Structural operations over a forest of folders and prompts. Every function
takes a forest and returns a new one: the input is never mutated, nodes off
the edited path are shared by reference, and each ancestor of an edited node
is rebuilt with model_copy.

Lookups are pre-order and the first match wins; ids are unique within a
user's vault.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterator, List, Optional, Tuple

from promptvault.constants import (
    DEFAULT_BRANCH_SUFFIX,
    DEFAULT_LABEL_SEPARATOR,
    DEFAULT_ROOT_OPTION_LABEL,
    ROOT_ID,
    VALIDATION_NAME_REQUIRED,
    VALIDATION_SELF_PARENT,
)
from promptvault.exceptions import InvalidStateError, NotFoundError, ValidationError
from promptvault.managers.version_ledger import apply_edit
from promptvault.models.base import Folder, Forest, Item, Prompt


@dataclass(frozen=True)
class FolderOption:
    """A selectable folder with its breadcrumb label."""

    id: str
    label: str


def _is_root(parent_id: Optional[str]) -> bool:
    return parent_id is None or parent_id == ROOT_ID


def _replace(
    items: List[Item],
    match: Callable[[Item], bool],
    fn: Callable[[Item], Optional[Item]],
) -> Tuple[List[Item], bool]:
    """Replace the first item satisfying match with fn(item).

    fn returning None drops the item. Returns the rebuilt list and whether
    a match was found; when nothing matched the original list comes back.
    """
    for index, item in enumerate(items):
        if match(item):
            replacement = fn(item)
            tail = items[index + 1:]
            if replacement is None:
                return items[:index] + tail, True
            return items[:index] + [replacement] + tail, True

        if isinstance(item, Folder) and item.children:
            children, found = _replace(item.children, match, fn)
            if found:
                rebuilt = item.model_copy(update={"children": children})
                return items[:index] + [rebuilt] + items[index + 1:], True

    return items, False


def _by_id(item_id: str) -> Callable[[Item], bool]:
    return lambda item: item.id == item_id


def _folder_by_id(folder_id: str) -> Callable[[Item], bool]:
    return lambda item: isinstance(item, Folder) and item.id == folder_id


# =============================================================================
# Traversal
# =============================================================================


def iter_items(forest: Forest) -> Iterator[Item]:
    """Yield every item in pre-order."""
    for item in forest:
        yield item
        if isinstance(item, Folder):
            yield from iter_items(item.children)


def iter_prompts(forest: Forest) -> Iterator[Prompt]:
    """Yield every prompt in pre-order."""
    for item in iter_items(forest):
        if isinstance(item, Prompt):
            yield item


def find_item(forest: Forest, item_id: str) -> Optional[Item]:
    """Find an item by id anywhere in the forest."""
    for item in iter_items(forest):
        if item.id == item_id:
            return item
    return None


def find_parent(forest: Forest, item_id: str) -> Optional[Folder]:
    """Find the folder that directly contains item_id.

    Returns None both for top-level items and for unknown ids.
    """
    for item in iter_items(forest):
        if isinstance(item, Folder) and any(c.id == item_id for c in item.children):
            return item
    return None


def _require_item(forest: Forest, item_id: str) -> Item:
    item = find_item(forest, item_id)
    if item is None:
        raise NotFoundError(f"Item '{item_id}' not found.")
    return item


def _require_prompt(forest: Forest, item_id: str) -> Prompt:
    item = _require_item(forest, item_id)
    if not isinstance(item, Prompt):
        raise InvalidStateError(f"Item '{item_id}' is a folder, not a prompt.")
    return item


# =============================================================================
# Insertion
# =============================================================================


def _insert(forest: Forest, parent_id: Optional[str], item: Item) -> Forest:
    if find_item(forest, item.id) is not None:
        raise InvalidStateError(f"Item '{item.id}' already exists in the vault.")

    if _is_root(parent_id):
        if item.parent_id is not None:
            item = item.model_copy(update={"parent_id": None})
        return [*forest, item]

    if item.id == parent_id:
        raise InvalidStateError(VALIDATION_SELF_PARENT)

    if item.parent_id != parent_id:
        item = item.model_copy(update={"parent_id": parent_id})

    updated, found = _replace(
        forest,
        _folder_by_id(parent_id),
        lambda folder: folder.model_copy(
            update={"children": [*folder.children, item]}
        ),
    )
    if not found:
        raise NotFoundError(f"Folder '{parent_id}' not found.")
    return updated


def insert_prompt(forest: Forest, parent_folder_id: Optional[str], prompt: Prompt) -> Forest:
    """Append a prompt to a folder's children, or to the top level.

    Args:
        forest: Current forest.
        parent_folder_id: Target folder id, or ROOT_ID/None for top level.
        prompt: Prompt to insert. Its parent_id is set to match.

    Returns:
        New forest containing the prompt.

    Raises:
        NotFoundError: If no folder has parent_folder_id.
        InvalidStateError: If an item with the prompt's id already exists.
    """
    return _insert(forest, parent_folder_id, prompt)


def insert_folder(forest: Forest, parent_id: Optional[str], folder: Folder) -> Forest:
    """Append a folder under parent_id, or at top level for ROOT_ID/None.

    Raises:
        NotFoundError: If no folder has parent_id.
        InvalidStateError: If the folder would parent itself or its id is taken.
    """
    return _insert(forest, parent_id, folder)


# =============================================================================
# Removal
# =============================================================================


def remove_item(forest: Forest, item_id: str) -> Forest:
    """Remove a prompt or an empty folder.

    A prompt's archived history goes with it. Folders must be emptied first.

    Raises:
        NotFoundError: If item_id is absent.
        InvalidStateError: If item_id is a folder that still has children.
    """
    item = _require_item(forest, item_id)
    if isinstance(item, Folder) and item.children:
        raise InvalidStateError(
            f"Folder '{item.name}' is not empty. Delete or move its contents first."
        )
    updated, _ = _replace(forest, _by_id(item_id), lambda _: None)
    return updated


# =============================================================================
# Updates
# =============================================================================


def update_content(
    forest: Forest, item_id: str, new_content: str, now: Optional[datetime] = None
) -> Forest:
    """Edit a prompt's content, archiving the old text when it changed.

    Unchanged content returns the input forest itself.

    Raises:
        NotFoundError: If item_id is absent.
        InvalidStateError: If item_id is a folder.
        ValidationError: If new_content is empty.
    """
    prompt = _require_prompt(forest, item_id)
    updated_prompt, archived = apply_edit(prompt, new_content, now)
    if archived is None:
        return forest

    updated, _ = _replace(forest, _by_id(item_id), lambda _: updated_prompt)
    return updated


def rename_item(
    forest: Forest, item_id: str, name: str, now: Optional[datetime] = None
) -> Forest:
    """Rename a folder or prompt. Renames never create a version."""
    if not name or not name.strip():
        raise ValidationError(VALIDATION_NAME_REQUIRED)
    _require_item(forest, item_id)

    now = now or datetime.now()
    updated, _ = _replace(
        forest,
        _by_id(item_id),
        lambda item: item.model_copy(update={"name": name, "updated_at": now}),
    )
    return updated


def set_favorite(
    forest: Forest, item_id: str, is_favorite: bool, now: Optional[datetime] = None
) -> Forest:
    """Flag or unflag a prompt as favorite without versioning it."""
    prompt = _require_prompt(forest, item_id)
    if prompt.is_favorite == is_favorite:
        return forest

    now = now or datetime.now()
    updated, _ = _replace(
        forest,
        _by_id(item_id),
        lambda item: item.model_copy(update={"is_favorite": is_favorite, "updated_at": now}),
    )
    return updated


def move_item(
    forest: Forest,
    item_id: str,
    new_parent_id: Optional[str],
    now: Optional[datetime] = None,
) -> Forest:
    """Move an item (with its subtree) under another folder or to top level.

    Moving to the current parent is a no-op.

    Raises:
        NotFoundError: If the item or the target folder is absent.
        InvalidStateError: If a folder would end up inside itself.
    """
    item = _require_item(forest, item_id)
    target_id = None if _is_root(new_parent_id) else new_parent_id

    if target_id is not None:
        target = find_item(forest, target_id)
        if not isinstance(target, Folder):
            raise NotFoundError(f"Folder '{target_id}' not found.")
        if target_id == item_id:
            raise InvalidStateError(VALIDATION_SELF_PARENT)
        if isinstance(item, Folder) and find_item(item.children, target_id) is not None:
            raise InvalidStateError(
                f"Cannot move folder '{item.name}' into one of its own subfolders."
            )

    current_parent = find_parent(forest, item_id)
    current_parent_id = current_parent.id if current_parent else None
    if current_parent_id == target_id:
        return forest

    detached, _ = _replace(forest, _by_id(item_id), lambda _: None)
    moved = item.model_copy(update={"parent_id": target_id, "updated_at": now or datetime.now()})
    return _insert(detached, target_id, moved)


def branch_prompt(
    forest: Forest,
    item_id: str,
    suffix: str = DEFAULT_BRANCH_SUFFIX,
    now: Optional[datetime] = None,
) -> Tuple[Forest, Prompt]:
    """Duplicate a prompt's current content into a fresh prompt.

    The branch gets a new id, starts again at version 1 with no history,
    is not a favorite, and is appended to the original's parent.

    Returns:
        Tuple of (new forest, the branch prompt).
    """
    source = _require_prompt(forest, item_id)
    parent = find_parent(forest, item_id)

    now = now or datetime.now()
    branch = Prompt(
        name=f"{source.name}{suffix}",
        content=source.content,
        parent_id=parent.id if parent else None,
        created_at=now,
        updated_at=now,
    )
    return insert_prompt(forest, branch.parent_id, branch), branch


# =============================================================================
# Derived views
# =============================================================================


def list_folder_options(
    forest: Forest,
    exclude_id: Optional[str] = None,
    include_root: bool = False,
    separator: str = DEFAULT_LABEL_SEPARATOR,
    root_label: str = DEFAULT_ROOT_OPTION_LABEL,
) -> List[FolderOption]:
    """Flatten folders into breadcrumb-labelled options, depth-first.

    An excluded folder drops its whole subtree, so a folder is never offered
    as a parent for itself or its descendants.
    """
    options: List[FolderOption] = []
    if include_root:
        options.append(FolderOption(id=ROOT_ID, label=root_label))

    def _walk(items: List[Item], prefix: str) -> None:
        for item in items:
            if item.id == exclude_id or not isinstance(item, Folder):
                continue
            label = f"{prefix}{separator}{item.name}" if prefix else item.name
            options.append(FolderOption(id=item.id, label=label))
            _walk(item.children, label)

    _walk(forest, "")
    return options
