"""
Test fixtures for the promptvault test suite.

Provides:
- Temporary directory fixtures (isolated from any real .promptvault/)
- Mock data builders for creating test items
- A sample forest used across store, storage and core tests
"""

import shutil
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Generator, List, Optional

import pytest

from promptvault.managers.events import get_event_bus
from promptvault.models.base import Folder, Forest, Prompt, VersionRecord


# =============================================================================
# Temporary Directory Fixtures
# =============================================================================


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for test isolation."""
    temp_path = Path(tempfile.mkdtemp(prefix="promptvault_test_"))
    yield temp_path
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def vault_dir(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary .promptvault/ directory structure."""
    vault_path = temp_dir / ".promptvault"
    vault_path.mkdir(parents=True)
    (vault_path / "users").mkdir()
    yield vault_path


@pytest.fixture(autouse=True)
def clean_event_bus():
    """Keep listeners from leaking between tests."""
    get_event_bus().clear()
    yield
    get_event_bus().clear()


# =============================================================================
# Mock Data Builders
# =============================================================================


FIXED_TIME = datetime(2024, 1, 1, 12, 0, 0)


class MockDataBuilder:
    """Helper class for building mock vault items for testing."""

    @staticmethod
    def create_folder(
        name: str = "Test Folder",
        id: Optional[str] = None,
        parent_id: Optional[str] = None,
        children: Optional[List] = None,
    ) -> Folder:
        """Create a mock Folder for testing."""
        kwargs = dict(
            name=name,
            parent_id=parent_id,
            children=children or [],
            created_at=FIXED_TIME,
            updated_at=FIXED_TIME,
        )
        if id:
            kwargs["id"] = id
        return Folder(**kwargs)

    @staticmethod
    def create_prompt(
        name: str = "Test Prompt",
        content: str = "v1",
        id: Optional[str] = None,
        parent_id: Optional[str] = None,
        version_number: int = 1,
        history: Optional[List[VersionRecord]] = None,
        is_favorite: bool = False,
    ) -> Prompt:
        """Create a mock Prompt for testing."""
        kwargs = dict(
            name=name,
            content=content,
            parent_id=parent_id,
            version_number=version_number,
            history=history or [],
            is_favorite=is_favorite,
            created_at=FIXED_TIME,
            updated_at=FIXED_TIME,
        )
        if id:
            kwargs["id"] = id
        return Prompt(**kwargs)


@pytest.fixture
def builder() -> MockDataBuilder:
    return MockDataBuilder()


@pytest.fixture
def sample_forest(builder) -> Forest:
    """A small forest:

    Marketing (f1)
        Campaigns (f2)
            Launch email (p2)
        Tagline (p1)
    Scratch (p3)
    """
    launch = builder.create_prompt("Launch email", "Write a launch email", id="p2", parent_id="f2")
    campaigns = builder.create_folder("Campaigns", id="f2", parent_id="f1", children=[launch])
    tagline = builder.create_prompt("Tagline", "Suggest a tagline", id="p1", parent_id="f1")
    marketing = builder.create_folder("Marketing", id="f1", children=[campaigns, tagline])
    scratch = builder.create_prompt("Scratch", "Free text", id="p3")
    return [marketing, scratch]
