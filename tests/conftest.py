from unittest.mock import patch

import pytest


@pytest.fixture
def at_toplevel():
    """Treat whatever directory a command runs in as the work-tree top level."""
    with patch("git.toplevel", side_effect=lambda path: path) as mock_toplevel:
        yield mock_toplevel
