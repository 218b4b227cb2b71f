import sys
from pathlib import Path
from unittest.mock import MagicMock

import pytest

# Make src importable (shared, image_cleanup, content, seo)
_root = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(_root / "src"))


@pytest.fixture
def supabase_client() -> MagicMock:
    """Fake Supabase client; each test wires the call chain it needs."""
    return MagicMock()


@pytest.fixture
def gateway() -> MagicMock:
    """Fake storage gateway: every deletion returns DELETED."""
    from shared.storage import DeletionResult

    mock = MagicMock()
    mock.delete.return_value = DeletionResult.DELETED
    return mock
