import sys
from pathlib import Path

import pytest

# Ensure 'src' is on sys.path for test imports without installing the package
ROOT = Path(__file__).resolve().parents[1]
src = ROOT / "src"
if str(src) not in sys.path:
    sys.path.insert(0, str(src))

from regionstore.flags import default_registry  # noqa: E402
from regionstore.storage import YamlRegionFile  # noqa: E402


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def region_file(tmp_path: Path) -> YamlRegionFile:
    return YamlRegionFile("world", tmp_path / "regions.yml")
