import asyncio
import logging
import os
import tempfile
from typing import Awaitable, Callable, Optional

from scipy.io.wavfile import write

logger = logging.getLogger(__name__)

RESTART_DELAY = 0.1  # recognizer rejects an immediate restart after stop

_models = {}


def _get_model(name: str = "base"):
    if name not in _models:
        from faster_whisper import WhisperModel
        _models[name] = WhisperModel(name, device="cpu", compute_type="int8")
    return _models[name]


def record_wav(seconds: float = 4.0, samplerate: int = 16000) -> str:
    import sounddevice as sd

    seconds = float(seconds)
    samplerate = int(samplerate)

    logger.info("Listening for %.1fs... speak now.", seconds)
    audio = sd.rec(int(seconds * samplerate), samplerate=samplerate, channels=1, dtype="int16")
    sd.wait()

    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=".wav")
    tmp.close()
    write(tmp.name, samplerate, audio)
    return tmp.name


def transcribe_wav(path: str, model_name: str = "base") -> str:
    model = _get_model(model_name)
    segments, _info = model.transcribe(path, beam_size=1, language="en")
    return " ".join(seg.text.strip() for seg in segments).strip()


def listen_and_transcribe(seconds: float = 4.0, model_name: str = "base") -> str:
    wav = record_wav(seconds=seconds)
    try:
        return transcribe_wav(wav, model_name)
    finally:
        try:
            os.remove(wav)
        except OSError:
            pass


class SpeechInput:
    """
    One recognition session at a time, guarded by session.listening.

    toggle_listening() while a session is running stops it. A session
    records one utterance, hands the lower-cased text to on_command and
    ends; no speech or an error ends it too.
    """

    def __init__(self, session, on_command: Callable[[str], Awaitable[object]],
                 on_start: Optional[Callable[[], None]] = None,
                 listen: Optional[Callable[[], str]] = None,
                 seconds: float = 4.0, model_name: str = "base",
                 restart_delay: float = RESTART_DELAY):
        self.session = session
        self.on_command = on_command
        self.on_start = on_start
        self.listen = listen or (lambda: listen_and_transcribe(seconds, model_name))
        self.restart_delay = restart_delay
        self._task: Optional[asyncio.Task] = None

    def toggle_listening(self) -> Optional[asyncio.Task]:
        if self.session.listening:
            self.stop_listening()
            return None
        self.session.listening = True
        self._task = asyncio.create_task(self._session(), name="marvin-listen")
        return self._task

    def stop_listening(self) -> None:
        self.session.listening = False
        task, self._task = self._task, None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    async def _session(self):
        try:
            await asyncio.sleep(self.restart_delay)
            if not self.session.listening:
                return
            if self.on_start is not None:
                self.on_start()
            try:
                text = await asyncio.to_thread(self.listen)
            except Exception:
                logger.warning("Speech recognition error", exc_info=True)
                return
            text = (text or "").strip().lower()
            if not text or not self.session.listening:
                return
            logger.info("Recognized command: %s", text)
            # the session is over once we have a result
            self.session.listening = False
            await self.on_command(text)
        finally:
            # a newer session may already own the flag
            if self._task is asyncio.current_task():
                self._task = None
                self.session.listening = False
