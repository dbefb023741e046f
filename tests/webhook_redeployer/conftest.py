"""
Shared fixtures for redeploy pipeline tests.
"""

import pytest
from unittest.mock import AsyncMock, Mock

from webhook_redeployer.callback import CallbackClient
from webhook_redeployer.config import RedeployerConfig
from webhook_redeployer.redeployer import Redeployer


@pytest.fixture
def config(tmp_path):
    """Default configuration with logs under a temp dir."""
    config = RedeployerConfig()
    config.logging.directory = str(tmp_path / "logs")
    return config


@pytest.fixture
def old_container():
    """The container currently running under the target name."""
    container = Mock()
    container.name = "app"
    container.id = "old-container-id"
    container.attrs = {"Image": "sha256:previous", "Name": "/app", "State": {"Running": True}}
    return container


@pytest.fixture
def new_container():
    """The container created from the freshly pulled image."""
    container = Mock()
    container.name = "app"
    container.id = "new-container-id"
    return container


@pytest.fixture
def mock_engine(old_container, new_container):
    """Mock ContainerEngine where every operation succeeds."""
    engine = Mock()
    engine.get_container = Mock(return_value=old_container)
    engine.image_id_of = Mock(return_value="sha256:previous")
    engine.stop_container = Mock(return_value=None)
    engine.remove_container = Mock(return_value=None)
    engine.pull_image = Mock(return_value=None)
    engine.create_container = Mock(return_value=new_container)
    engine.start_container = Mock(return_value=None)
    engine.remove_if_exists = Mock(return_value=True)
    return engine


@pytest.fixture
def mock_callback():
    """Mock CallbackClient whose acknowledgement always goes through."""
    callback = Mock(spec=CallbackClient)
    callback.acknowledge = AsyncMock(return_value=None)
    return callback


@pytest.fixture
def redeployer(config, mock_engine, mock_callback):
    """Redeployer wired to mocks."""
    return Redeployer(config, mock_engine, callback_client=mock_callback)
