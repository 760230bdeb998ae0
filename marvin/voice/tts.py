import asyncio
import logging
import platform
from typing import List, Optional

logger = logging.getLogger(__name__)

SPEAK_TIMEOUT = 120


def _command(text: str) -> List[str]:
    if platform.system().lower() == "darwin":
        return ["say", text]
    return ["espeak-ng", text]


class SpeechOutput:
    """
    Text to speech through the system voice (`say` on macOS, espeak-ng elsewhere).

    speak() returns when playback ends. Starting a new line cuts off the
    one still playing, the same way a browser speech queue is cancelled.
    """

    def __init__(self):
        self._proc: Optional[asyncio.subprocess.Process] = None

    def cancel(self) -> None:
        proc, self._proc = self._proc, None
        if proc is not None and proc.returncode is None:
            proc.terminate()

    async def speak(self, text: str) -> None:
        text = (text or "").strip()
        if not text:
            return
        self.cancel()
        try:
            proc = await asyncio.create_subprocess_exec(
                *_command(text),
                stdout=asyncio.subprocess.DEVNULL,
                stderr=asyncio.subprocess.DEVNULL,
            )
        except OSError as e:
            logger.warning("TTS unavailable: %s", e)
            return

        self._proc = proc
        try:
            await asyncio.wait_for(proc.wait(), timeout=SPEAK_TIMEOUT)
        except asyncio.TimeoutError:
            logger.warning("TTS still playing after %ss, stopping it", SPEAK_TIMEOUT)
        finally:
            # timed out or cancelled mid-line: the voice must not outlive speak()
            if proc.returncode is None:
                proc.terminate()
            if self._proc is proc:
                self._proc = None
