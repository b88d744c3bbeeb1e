"""
Tests for the hierarchical item store.

Every operation is checked for its result and for leaving the input forest
untouched.
"""
import copy
from datetime import timedelta

import pytest

from promptvault.constants import ROOT_ID
from promptvault.exceptions import InvalidStateError, NotFoundError, ValidationError
from promptvault.managers import item_store
from promptvault.managers.item_store import FolderOption

from conftest import FIXED_TIME


class TestInsert:
    """Test insert_prompt and insert_folder."""

    def test_insert_folder_at_root_on_empty_forest(self, builder):
        folder = builder.create_folder("Marketing", id="f1")

        forest = item_store.insert_folder([], ROOT_ID, folder)

        assert [item.id for item in forest] == ["f1"]

    def test_insert_prompt_into_folder(self, builder):
        forest = item_store.insert_folder([], ROOT_ID, builder.create_folder("Marketing", id="f1"))
        prompt = builder.create_prompt(id="p1", content="v1")

        forest = item_store.insert_prompt(forest, "f1", prompt)

        assert [child.id for child in forest[0].children] == ["p1"]
        assert forest[0].children[0].parent_id == "f1"

    def test_insert_appends_in_insertion_order(self, sample_forest, builder):
        forest = item_store.insert_prompt(sample_forest, "f1", builder.create_prompt(id="p9"))

        assert [c.id for c in forest[0].children] == ["f2", "p1", "p9"]

    def test_insert_into_nested_folder(self, sample_forest, builder):
        forest = item_store.insert_folder(sample_forest, "f2", builder.create_folder("Q3", id="f3"))

        nested = item_store.find_item(forest, "f3")
        assert nested.parent_id == "f2"
        assert [c.id for c in item_store.find_item(forest, "f2").children] == ["p2", "f3"]

    def test_insert_with_none_parent_goes_to_root(self, sample_forest, builder):
        forest = item_store.insert_prompt(sample_forest, None, builder.create_prompt(id="p9"))

        assert forest[-1].id == "p9"
        assert forest[-1].parent_id is None

    def test_insert_unknown_parent_raises(self, sample_forest, builder):
        with pytest.raises(NotFoundError):
            item_store.insert_prompt(sample_forest, "missing", builder.create_prompt(id="p9"))

    def test_insert_under_prompt_raises(self, sample_forest, builder):
        with pytest.raises(NotFoundError):
            item_store.insert_prompt(sample_forest, "p1", builder.create_prompt(id="p9"))

    def test_insert_duplicate_id_raises(self, sample_forest, builder):
        with pytest.raises(InvalidStateError):
            item_store.insert_prompt(sample_forest, ROOT_ID, builder.create_prompt(id="p2"))

    def test_insert_does_not_mutate_input(self, sample_forest, builder):
        snapshot = copy.deepcopy(sample_forest)

        item_store.insert_prompt(sample_forest, "f2", builder.create_prompt(id="p9"))

        assert sample_forest == snapshot

    def test_unchanged_subtrees_are_shared(self, sample_forest, builder):
        forest = item_store.insert_prompt(sample_forest, "f2", builder.create_prompt(id="p9"))

        assert forest[1] is sample_forest[1]
        assert forest[0].children[1] is sample_forest[0].children[1]
        assert forest[0] is not sample_forest[0]


class TestRemove:
    """Test remove_item."""

    def test_remove_prompt(self, sample_forest):
        forest = item_store.remove_item(sample_forest, "p2")

        assert item_store.find_item(forest, "p2") is None
        assert item_store.find_item(forest, "f2").children == []

    def test_remove_top_level_prompt(self, sample_forest):
        forest = item_store.remove_item(sample_forest, "p3")

        assert [item.id for item in forest] == ["f1"]

    def test_remove_empty_folder(self, sample_forest):
        forest = item_store.remove_item(sample_forest, "p2")
        forest = item_store.remove_item(forest, "f2")

        assert [c.id for c in forest[0].children] == ["p1"]

    def test_remove_non_empty_folder_raises(self, sample_forest):
        with pytest.raises(InvalidStateError, match="not empty"):
            item_store.remove_item(sample_forest, "f1")

    def test_remove_unknown_id_raises(self, sample_forest):
        with pytest.raises(NotFoundError):
            item_store.remove_item(sample_forest, "missing")

    def test_insert_then_remove_round_trip(self, sample_forest, builder):
        prompt = builder.create_prompt(id="p9")

        forest = item_store.remove_item(
            item_store.insert_prompt(sample_forest, "f2", prompt), "p9"
        )

        assert forest == sample_forest


class TestUpdateContent:
    """Test update_content."""

    def test_scenario_versions_and_noop(self, builder):
        forest = item_store.insert_folder([], ROOT_ID, builder.create_folder("Marketing", id="f1"))
        forest = item_store.insert_prompt(forest, "f1", builder.create_prompt(id="p1", content="v1"))

        forest = item_store.update_content(forest, "p1", "v2")
        p1 = item_store.find_item(forest, "p1")
        assert p1.version_number == 2
        assert p1.content == "v2"
        assert [(r.version_number, r.content) for r in p1.history] == [(1, "v1")]

        again = item_store.update_content(forest, "p1", "v2")
        assert again is forest
        assert item_store.find_item(again, "p1").version_number == 2

    def test_update_keeps_position(self, sample_forest):
        forest = item_store.update_content(sample_forest, "p1", "new")

        assert [c.id for c in forest[0].children] == ["f2", "p1"]

    def test_update_stamps_time(self, sample_forest):
        now = FIXED_TIME + timedelta(days=1)

        forest = item_store.update_content(sample_forest, "p2", "new", now=now)

        assert item_store.find_item(forest, "p2").updated_at == now

    def test_update_does_not_mutate_input(self, sample_forest):
        snapshot = copy.deepcopy(sample_forest)

        item_store.update_content(sample_forest, "p2", "new")

        assert sample_forest == snapshot

    def test_update_unknown_id_raises(self, sample_forest):
        with pytest.raises(NotFoundError):
            item_store.update_content(sample_forest, "missing", "x")

    def test_update_folder_raises(self, sample_forest):
        with pytest.raises(InvalidStateError):
            item_store.update_content(sample_forest, "f1", "x")

    def test_update_empty_content_raises(self, sample_forest):
        with pytest.raises(ValidationError):
            item_store.update_content(sample_forest, "p1", "")


class TestNonVersioningEdits:
    """Test rename_item, set_favorite and move_item."""

    def test_rename_does_not_version(self, sample_forest):
        forest = item_store.rename_item(sample_forest, "p1", "Slogan")

        p1 = item_store.find_item(forest, "p1")
        assert p1.name == "Slogan"
        assert p1.version_number == 1
        assert p1.history == []

    def test_rename_folder(self, sample_forest):
        forest = item_store.rename_item(sample_forest, "f2", "Launches")

        assert item_store.find_item(forest, "f2").name == "Launches"

    def test_rename_blank_raises(self, sample_forest):
        with pytest.raises(ValidationError):
            item_store.rename_item(sample_forest, "p1", "  ")

    def test_set_favorite(self, sample_forest):
        forest = item_store.set_favorite(sample_forest, "p3", True)

        p3 = item_store.find_item(forest, "p3")
        assert p3.is_favorite
        assert p3.version_number == 1

    def test_set_favorite_unchanged_is_noop(self, sample_forest):
        assert item_store.set_favorite(sample_forest, "p3", False) is sample_forest

    def test_set_favorite_on_folder_raises(self, sample_forest):
        with pytest.raises(InvalidStateError):
            item_store.set_favorite(sample_forest, "f1", True)

    def test_move_prompt_between_folders(self, sample_forest):
        forest = item_store.move_item(sample_forest, "p3", "f2")

        assert [item.id for item in forest] == ["f1"]
        p3 = item_store.find_item(forest, "p3")
        assert p3.parent_id == "f2"
        assert p3.version_number == 1
        assert [c.id for c in item_store.find_item(forest, "f2").children] == ["p2", "p3"]

    def test_move_folder_to_root_keeps_subtree(self, sample_forest):
        forest = item_store.move_item(sample_forest, "f2", ROOT_ID)

        assert [item.id for item in forest] == ["f1", "p3", "f2"]
        assert forest[2].parent_id is None
        assert [c.id for c in forest[2].children] == ["p2"]

    def test_move_to_current_parent_is_noop(self, sample_forest):
        assert item_store.move_item(sample_forest, "p1", "f1") is sample_forest

    def test_move_folder_into_itself_raises(self, sample_forest):
        with pytest.raises(InvalidStateError):
            item_store.move_item(sample_forest, "f1", "f1")

    def test_move_folder_into_descendant_raises(self, sample_forest):
        with pytest.raises(InvalidStateError):
            item_store.move_item(sample_forest, "f1", "f2")

    def test_move_to_unknown_folder_raises(self, sample_forest):
        with pytest.raises(NotFoundError):
            item_store.move_item(sample_forest, "p1", "missing")


class TestBranch:
    """Test branch_prompt."""

    def test_branch_copies_content_not_history(self, sample_forest):
        forest = item_store.update_content(sample_forest, "p1", "second")
        forest = item_store.set_favorite(forest, "p1", True)

        forest, branch = item_store.branch_prompt(forest, "p1")

        assert branch.id != "p1"
        assert branch.name == "Tagline (Branch)"
        assert branch.content == "second"
        assert branch.version_number == 1
        assert branch.history == []
        assert branch.is_favorite is False
        assert branch.parent_id == "f1"
        assert [c.id for c in item_store.find_item(forest, "f1").children] == ["f2", "p1", branch.id]

    def test_branch_top_level_prompt(self, sample_forest):
        forest, branch = item_store.branch_prompt(sample_forest, "p3", suffix=" copy")

        assert branch.name == "Scratch copy"
        assert branch.parent_id is None
        assert forest[-1].id == branch.id

    def test_branch_leaves_original_untouched(self, sample_forest):
        forest, _ = item_store.branch_prompt(sample_forest, "p2")

        assert item_store.find_item(forest, "p2") == item_store.find_item(sample_forest, "p2")

    def test_branch_folder_raises(self, sample_forest):
        with pytest.raises(InvalidStateError):
            item_store.branch_prompt(sample_forest, "f1")


class TestFolderOptions:
    """Test list_folder_options."""

    def test_breadcrumb_labels_depth_first(self, sample_forest):
        options = item_store.list_folder_options(sample_forest)

        assert options == [
            FolderOption(id="f1", label="Marketing"),
            FolderOption(id="f2", label="Marketing > Campaigns"),
        ]

    def test_root_option_first(self, sample_forest):
        options = item_store.list_folder_options(sample_forest, include_root=True)

        assert options[0] == FolderOption(id=ROOT_ID, label="No Parent (Root Level)")
        assert len(options) == 3

    def test_exclude_drops_subtree(self, sample_forest):
        assert item_store.list_folder_options(sample_forest, exclude_id="f1") == []

    def test_exclude_nested_folder(self, sample_forest):
        options = item_store.list_folder_options(sample_forest, exclude_id="f2")

        assert [o.id for o in options] == ["f1"]

    def test_custom_separator(self, sample_forest):
        options = item_store.list_folder_options(sample_forest, separator=" / ")

        assert options[1].label == "Marketing / Campaigns"

    def test_empty_forest(self):
        assert item_store.list_folder_options([]) == []


class TestTraversal:
    """Test find helpers and iterators."""

    def test_iter_items_pre_order(self, sample_forest):
        assert [i.id for i in item_store.iter_items(sample_forest)] == ["f1", "f2", "p2", "p1", "p3"]

    def test_iter_prompts(self, sample_forest):
        assert [p.id for p in item_store.iter_prompts(sample_forest)] == ["p2", "p1", "p3"]

    def test_find_parent(self, sample_forest):
        assert item_store.find_parent(sample_forest, "p2").id == "f2"
        assert item_store.find_parent(sample_forest, "p3") is None
