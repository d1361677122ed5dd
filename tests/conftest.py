import sys
from pathlib import Path

import pytest

# Ensure local package is imported before any installed version
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from reduct_kernels.reduct_kernels import Session  # noqa: E402


@pytest.fixture(autouse=True)
def restore_config():
    with Session():
        yield
