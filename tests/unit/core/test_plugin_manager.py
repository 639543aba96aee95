### tests/unit/core/test_plugin_manager.py
import logging
from typing import Any, Dict, Optional
from unittest.mock import MagicMock, patch

import pytest

from verona_voice.core.plugin_manager import PluginManager
from verona_voice.core.types import Plugin


class SampleGoodPlugin(Plugin):
    plugin_id: str = "sample_good_plugin_v1"
    description: str = "A plugin that sets up fine."

    def __init__(self) -> None:
        self.setup_config: Optional[Dict[str, Any]] = None
        self.torn_down = False

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.setup_config = config

    async def teardown(self) -> None:
        self.torn_down = True


class SampleFailingSetupPlugin(Plugin):
    plugin_id: str = "sample_failing_setup_plugin_v1"

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        raise RuntimeError("setup exploded")


class NotAPlugin:
    pass


@pytest.mark.asyncio
async def test_register_and_instantiate_plugin(plugin_manager: PluginManager):
    plugin_manager.register_plugin_class(SampleGoodPlugin)
    assert "sample_good_plugin_v1" in plugin_manager.list_discovered_plugin_classes()

    instance = await plugin_manager.get_plugin_instance("sample_good_plugin_v1", config={"a": 1})
    assert isinstance(instance, SampleGoodPlugin)
    assert instance.setup_config == {"a": 1}

    again = await plugin_manager.get_plugin_instance("sample_good_plugin_v1")
    assert again is instance


def test_register_invalid_class_raises(plugin_manager: PluginManager):
    with pytest.raises(TypeError):
        plugin_manager.register_plugin_class(NotAPlugin)  # type: ignore[arg-type]


@pytest.mark.asyncio
async def test_get_unknown_plugin_returns_none(plugin_manager: PluginManager, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.WARNING)
    assert await plugin_manager.get_plugin_instance("nope_v1") is None
    assert "Plugin class ID 'nope_v1' not found." in caplog.text


@pytest.mark.asyncio
async def test_failing_setup_returns_none_and_logs(plugin_manager: PluginManager, caplog: pytest.LogCaptureFixture):
    caplog.set_level(logging.ERROR)
    plugin_manager.register_plugin_class(SampleFailingSetupPlugin)
    assert await plugin_manager.get_plugin_instance("sample_failing_setup_plugin_v1") is None
    assert "setup exploded" in caplog.text


@pytest.mark.asyncio
async def test_teardown_all_plugins(plugin_manager: PluginManager):
    plugin_manager.register_plugin_class(SampleGoodPlugin)
    instance = await plugin_manager.get_plugin_instance("sample_good_plugin_v1")
    await plugin_manager.teardown_all_plugins()
    assert instance.torn_down is True
    fresh = await plugin_manager.get_plugin_instance("sample_good_plugin_v1")
    assert fresh is not instance


@pytest.mark.asyncio
async def test_discover_plugins_from_entry_points():
    pm = PluginManager(entry_point_group="test.group")
    good_ep = MagicMock()
    good_ep.name = "good"
    good_ep.load.return_value = SampleGoodPlugin
    bad_ep = MagicMock()
    bad_ep.name = "bad"
    bad_ep.load.return_value = NotAPlugin
    broken_ep = MagicMock()
    broken_ep.name = "broken"
    broken_ep.load.side_effect = ImportError("missing dependency")

    mock_eps = MagicMock()
    mock_eps.select.return_value = [good_ep, bad_ep, broken_ep]
    with patch("importlib.metadata.entry_points", return_value=mock_eps):
        await pm.discover_plugins()

    mock_eps.select.assert_called_once_with(group="test.group")
    assert list(pm.list_discovered_plugin_classes()) == ["sample_good_plugin_v1"]
