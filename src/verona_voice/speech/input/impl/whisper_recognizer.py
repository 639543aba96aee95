import asyncio
import logging
import threading
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from verona_voice.speech.input.abc import SpeechRecognizerPlugin
from verona_voice.speech.types import RecognitionError, RecognitionSegment

logger = logging.getLogger(__name__)

try:
    import numpy as np
    import sounddevice as sd
    from faster_whisper import WhisperModel
    WHISPER_AVAILABLE = True
except (ImportError, OSError):
    # sounddevice raises OSError when the PortAudio shared library is missing.
    np = None # type: ignore
    sd = None # type: ignore
    WhisperModel = None # type: ignore
    WHISPER_AVAILABLE = False
    logger.warning(
        "WhisperSpeechRecognizerPlugin: 'faster-whisper', 'sounddevice' or 'numpy' not available. "
        "This plugin will not be functional. Install the 'whisper' extra."
    )


class WhisperSpeechRecognizerPlugin(SpeechRecognizerPlugin):
    """
    Records one utterance from the default microphone and transcribes it locally.

    Recording stops after trailing silence, when the session is stopped, or
    at `max_seconds`. A session that never rises above `silence_rms` within
    `no_speech_timeout_seconds` reports "no-speech".
    """
    plugin_id: str = "whisper_speech_recognizer_v1"
    description: str = "Local microphone capture with sounddevice and transcription with faster-whisper."

    _model: Optional[Any] = None
    _sample_rate: int = 16000
    _block_seconds: float = 0.1
    _silence_rms: float = 0.01
    _silence_seconds: float = 1.0
    _no_speech_timeout_seconds: float = 5.0
    _max_seconds: float = 15.0
    _beam_size: int = 5

    async def setup(self, config: Optional[Dict[str, Any]] = None) -> None:
        if not WHISPER_AVAILABLE:
            logger.error(f"{self.plugin_id}: Required libraries not available. Cannot proceed.")
            return
        cfg = config or {}
        self._sample_rate = int(cfg.get("sample_rate", self._sample_rate))
        self._block_seconds = float(cfg.get("block_seconds", self._block_seconds))
        self._silence_rms = float(cfg.get("silence_rms", self._silence_rms))
        self._silence_seconds = float(cfg.get("silence_seconds", self._silence_seconds))
        self._no_speech_timeout_seconds = float(cfg.get("no_speech_timeout_seconds", self._no_speech_timeout_seconds))
        self._max_seconds = float(cfg.get("max_seconds", self._max_seconds))
        self._beam_size = int(cfg.get("beam_size", self._beam_size))

        model_name = cfg.get("model_size_or_path", "base.en")
        device = cfg.get("device", "cpu")
        compute_type = cfg.get("compute_type", "int8")
        loop = asyncio.get_running_loop()
        try:
            self._model = await loop.run_in_executor(
                None, lambda: WhisperModel(model_name, device=device, compute_type=compute_type)
            )
            logger.info(f"{self.plugin_id}: Loaded faster-whisper model '{model_name}' on {device} ({compute_type}).")
        except Exception as e:
            logger.error(f"{self.plugin_id}: Failed to load faster-whisper model '{model_name}': {e}", exc_info=True)
            self._model = None

    def is_available(self) -> bool:
        return WHISPER_AVAILABLE and self._model is not None

    def _record(self, stop_flag: threading.Event) -> Tuple[Any, bool]:
        blocksize = max(1, int(self._sample_rate * self._block_seconds))
        frames: List[Any] = []
        heard_speech = False
        silent_for = 0.0
        elapsed = 0.0
        with sd.InputStream(samplerate=self._sample_rate, channels=1, dtype="float32", blocksize=blocksize) as stream:
            while not stop_flag.is_set() and elapsed < self._max_seconds:
                chunk, overflowed = stream.read(blocksize)
                if overflowed:
                    logger.debug(f"{self.plugin_id}: Input overflow while recording.")
                mono = chunk.reshape(-1)
                frames.append(mono.copy())
                elapsed += self._block_seconds
                rms = float(np.sqrt(np.mean(mono ** 2)))
                if rms >= self._silence_rms:
                    heard_speech = True
                    silent_for = 0.0
                    continue
                silent_for += self._block_seconds
                if heard_speech and silent_for >= self._silence_seconds:
                    break
                if not heard_speech and elapsed >= self._no_speech_timeout_seconds:
                    break
        audio = np.concatenate(frames) if frames else np.zeros(0, dtype=np.float32)
        return audio, heard_speech

    def _transcribe(self, audio: Any, language: str) -> str:
        whisper_language = language.split("-")[0].lower() or None
        segments, info = self._model.transcribe(audio, language=whisper_language, beam_size=self._beam_size)
        texts = [seg.text.strip() for seg in segments if seg.text and seg.text.strip()]
        logger.debug(f"{self.plugin_id}: Transcribed {len(texts)} segment(s), detected language '{info.language}'.")
        return " ".join(texts)

    async def _mirror_stop(self, stop_event: asyncio.Event, stop_flag: threading.Event) -> None:
        await stop_event.wait()
        stop_flag.set()

    async def recognize(self, language: str, stop_event: asyncio.Event) -> AsyncIterator[RecognitionSegment]:
        if not self.is_available():
            raise RecognitionError("audio-capture", f"{self.plugin_id}: Recognizer not initialized.")
        loop = asyncio.get_running_loop()
        stop_flag = threading.Event()
        watcher = asyncio.ensure_future(self._mirror_stop(stop_event, stop_flag))
        try:
            audio, heard_speech = await loop.run_in_executor(None, self._record, stop_flag)
        finally:
            stop_flag.set()
            watcher.cancel()

        if not heard_speech:
            if stop_event.is_set():
                return
            raise RecognitionError("no-speech")

        text = await loop.run_in_executor(None, self._transcribe, audio, language)
        if not text:
            raise RecognitionError("no-speech")
        yield RecognitionSegment(text=text, is_final=True)

    async def teardown(self) -> None:
        self._model = None
        logger.debug(f"{self.plugin_id}: Teardown complete.")
