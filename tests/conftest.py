from pathlib import Path

import pytest

FIXTURES = Path(__file__).resolve().parent / "fixtures"

TARGET_ID = "1D6058900D05DD3D006BFB54"
RESOURCES_ID = "1D60588D0D05DD3D006BFB54"
SOURCES_ID = "1D60588E0D05DD3D006BFB54"
FRAMEWORKS_ID = "1D60588F0D05DD3D006BFB54"
COPY_WWW_ID = "304B58A110DAC018002A0835"
SENTRY_PHASE_ID = "A1B2C3D4E5F60718293A4B5C"
NEW_PHASE_ID = "0F0E0D0C0B0A090807060504"


@pytest.fixture
def clean_text() -> str:
    return (FIXTURES / "cordova_clean.pbxproj").read_text(encoding="utf-8")


@pytest.fixture
def patched_text() -> str:
    return (FIXTURES / "cordova_patched.pbxproj").read_text(encoding="utf-8")


@pytest.fixture
def fixed_id():
    """id_factory that always hands out NEW_PHASE_ID."""
    return lambda descriptor: NEW_PHASE_ID


def write_project(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path
