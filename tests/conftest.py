from pathlib import Path

import pytest

from boardsync.protocols import MockSettingsClient, RecordingSetters
from boardsync.settings import UserSettings

CONFIG_YAML = """\
server_url: "http://settings.test:3008"
api_key: "${BOARDSYNC_API_KEY}"
timeout: 5
retries: 0
log_level: warning
"""


@pytest.fixture
def config() -> UserSettings:
    return UserSettings(
        server_url="http://settings.test:3008",
        api_key="secret-key",
        timeout=5,
        retries=0,
        retry_backoff_seconds=0,
    )


@pytest.fixture
def config_file(tmp_path: Path) -> Path:
    path = tmp_path / "boardsync.yaml"
    path.write_text(CONFIG_YAML)
    return path


@pytest.fixture
def setters() -> RecordingSetters:
    return RecordingSetters()


@pytest.fixture
def client() -> MockSettingsClient:
    return MockSettingsClient(
        {
            "/projects/alpha": {"imagePath": "bg.png", "cardOpacity": 0.5},
            "/projects/beta": {
                "imagePath": "beta.jpg",
                "cardOpacity": 80,
                "columnOpacity": 70,
                "columnBorderEnabled": False,
                "cardGlassmorphism": False,
                "cardBorderEnabled": False,
                "cardBorderOpacity": 40,
                "hideScrollbar": True,
            },
        }
    )
