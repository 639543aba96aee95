"""Pytest fixtures and global test configuration for verona-voice."""
import asyncio
import logging
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional, Union

import pytest

from verona_voice.catalog.types import FaqItem, Product
from verona_voice.core.plugin_manager import PluginManager
from verona_voice.core.types import Plugin as BasePluginForKP
from verona_voice.security.key_provider import KeyProvider
from verona_voice.speech.input.abc import SpeechRecognizerPlugin
from verona_voice.speech.output.abc import SpeechSynthesizerPlugin
from verona_voice.speech.types import RecognitionSegment


@pytest.fixture()
def plugin_manager() -> PluginManager:
    # Discovery is not run here; tests register the plugin classes they need.
    return PluginManager()


@pytest.fixture()
async def mock_key_provider() -> KeyProvider:
    class MockKeyProviderImpl(KeyProvider, BasePluginForKP):
        def __init__(self, keys: Dict[str, str]):
            self.keys: Dict[str, str] = keys

        @property
        def plugin_id(self) -> str:
            return "mock_key_provider_fixture_v1_from_conftest"

        async def get_key(self, key_name: str) -> Optional[str]:
            logging.debug(f"MockKeyProviderFixture: Requesting key '{key_name}'")
            return self.keys.get(key_name)

        async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
            logging.debug(f"{self.plugin_id} setup (mock).")

        async def teardown(self) -> None:
            logging.debug(f"{self.plugin_id} teardown (mock).")

    provider = MockKeyProviderImpl(
        {
            "GOOGLE_API_KEY": "test_google_key_from_conftest_fixture",
            "OPENAI_API_KEY": "test_openai_key_from_conftest_fixture",
        }
    )
    await provider.setup()
    return provider


# --- Storefront fixtures ---

def _product(product_id: str, name: str, price: float, category: str = "Apparel") -> Product:
    return Product(
        id=product_id,
        name=name,
        description=f"{name} for testing.",
        price=price,
        category=category,
        image_url=f"https://example.test/{product_id}.png",
    )


@pytest.fixture()
def sample_products() -> List[Product]:
    return [
        _product("d1", "Summer Dress", 499.0),
        _product("d2", "Linen Shirt", 349.5),
        _product("d3", "Wool Coat Charcoal", 1995.0),
    ]


@pytest.fixture()
def sample_faqs() -> List[FaqItem]:
    return [
        FaqItem(id="faq1", question="What is your return policy?", answer="You can return items within 30 days."),
        FaqItem(id="faq2", question="How long does shipping take?", answer="Shipping takes 3-5 business days."),
    ]


class RecordingNavigator:
    def __init__(self) -> None:
        self.paths: List[str] = []

    def __call__(self, path: str) -> None:
        self.paths.append(path)


@pytest.fixture()
def navigator() -> RecordingNavigator:
    return RecordingNavigator()


# --- Speech backends ---

ScriptItem = Union[str, List[RecognitionSegment], BaseException, None]


class FakeRecognizer(SpeechRecognizerPlugin):
    """
    Plays back one scripted outcome per capture session.

    A string is one final segment, a list is a sequence of segments, an
    exception is raised, and None (or an exhausted script) waits until the
    session is stopped or cancelled.
    """
    plugin_id: str = "fake_speech_recognizer_v1"
    description: str = "Scripted recognizer for tests."

    def __init__(self) -> None:
        self.script: List[ScriptItem] = []
        self.available = True
        self.sessions = 0
        self.languages: List[str] = []

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        self.script = list((config or {}).get("script", self.script))

    def is_available(self) -> bool:
        return self.available

    async def recognize(self, language: str, stop_event: asyncio.Event) -> AsyncIterator[RecognitionSegment]:
        self.sessions += 1
        self.languages.append(language)
        item = self.script.pop(0) if self.script else None
        if item is None:
            await stop_event.wait()
            return
        if isinstance(item, BaseException):
            raise item
        if isinstance(item, str):
            yield RecognitionSegment(text=item, is_final=True)
            return
        for segment in item:
            yield segment
            await asyncio.sleep(0)

    async def teardown(self) -> None:
        self.script = []


class FakeSynthesizer(SpeechSynthesizerPlugin):
    """Records spoken text. Holds each utterance while `gate` is set and not yet released."""
    plugin_id: str = "fake_speech_synthesizer_v1"
    description: str = "Recording synthesizer for tests."

    def __init__(self) -> None:
        self.spoken: List[str] = []
        self.available = True
        self.gate: Optional[asyncio.Event] = None
        self.fail_with: Optional[BaseException] = None

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        pass

    def is_available(self) -> bool:
        return self.available

    async def speak(self, text: str, language: str) -> None:
        self.spoken.append(text)
        if self.gate is not None:
            await self.gate.wait()
        if self.fail_with is not None:
            raise self.fail_with

    async def teardown(self) -> None:
        pass


@pytest.fixture()
def fake_recognizer() -> FakeRecognizer:
    return FakeRecognizer()


@pytest.fixture()
def fake_synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer()


@pytest.fixture()
def wait_until() -> Callable[..., Awaitable[None]]:
    async def _wait_until(predicate: Callable[[], bool], timeout: float = 2.0) -> None:
        loop = asyncio.get_running_loop()
        deadline = loop.time() + timeout
        while not predicate():
            if loop.time() > deadline:
                raise AssertionError("Condition not met before timeout.")
            await asyncio.sleep(0.001)
    return _wait_until


@pytest.fixture(autouse=True)
def reset_library_logger():
    """DefaultLogAdapter may attach a handler and stop propagation; undo it so caplog keeps working."""
    yield
    library_logger = logging.getLogger("verona_voice")
    for handler in list(library_logger.handlers):
        library_logger.removeHandler(handler)
    library_logger.propagate = True
    library_logger.setLevel(logging.NOTSET)
