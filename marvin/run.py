import asyncio
import logging
import sys
import threading

from dotenv import load_dotenv

from marvin.brain import narrator
from marvin.brain.orchestrator import build_assistant
from marvin.brain.speaker import Conversation
from marvin.config import Settings, setup_logging
from marvin.voice.stt_whisper import SpeechInput
from marvin.voice.tts import SpeechOutput

logger = logging.getLogger("marvin")

HELP = """Marvin: type a command, or
  /voice      = speak one command (again to stop listening)
  /text       = text mode (stops listening)
  /pro on|off = toggle pro mode
  /ask <msg>  = ask the language model directly
  /stopall    = stop camera and emotion detection
  /quit       = exit"""


def _print_message(msg):
    print(f"{msg.sender}: {msg.text}", flush=True)


def _stdin_worker(loop, lines: asyncio.Queue):
    for line in sys.stdin:
        loop.call_soon_threadsafe(lines.put_nowait, line.rstrip("\n"))
    loop.call_soon_threadsafe(lines.put_nowait, None)


async def _wait_hidden(session, poll: float = 0.1):
    while session.visible:
        await asyncio.sleep(poll)


async def run(settings: Settings):
    assistant = build_assistant(settings, voice=SpeechOutput(), conversation=Conversation(_print_message))
    session = assistant.session
    speech_in = SpeechInput(
        session,
        on_command=assistant.handle,
        on_start=lambda: assistant.responder.show(narrator.LISTENING),
        seconds=settings.listen_seconds,
        model_name=settings.whisper_model,
    )

    lines: asyncio.Queue = asyncio.Queue()
    loop = asyncio.get_running_loop()
    threading.Thread(target=_stdin_worker, args=(loop, lines), daemon=True).start()

    print(HELP)
    assistant.router.welcome()

    pending = set()

    def done(task):
        pending.discard(task)
        if not task.cancelled() and task.exception() is not None:
            logger.error("Command failed", exc_info=task.exception())

    def spawn(coro):
        task = asyncio.create_task(coro)
        pending.add(task)
        task.add_done_callback(done)

    hidden = asyncio.create_task(_wait_hidden(session))
    hidden.add_done_callback(
        lambda t: t.cancelled() or print("(Marvin is hidden. Restart it to interact again. Ctrl+C exits.)"))
    try:
        while True:
            line = await lines.get()
            if line is None:
                break
            text = line.strip()
            if not text or not session.visible:
                # after shutdown nothing is processed until a restart
                continue

            if text == "/quit":
                break
            elif text == "/voice":
                session.set_input_mode("voice")
                speech_in.toggle_listening()
            elif text == "/text":
                session.set_input_mode("text")
                speech_in.stop_listening()
            elif text.startswith("/pro"):
                arg = text[len("/pro"):].strip().lower()
                if arg not in ("on", "off"):
                    print("Usage: /pro on|off")
                    continue
                spawn(assistant.router.set_pro_mode(arg == "on"))
            elif text.startswith("/ask "):
                spawn(assistant.router.query_llm(text[len("/ask "):].strip()))
            elif text == "/stopall":
                spawn(assistant.router.stop_all_detection())
            elif text.startswith("/"):
                print(HELP)
            else:
                # each command runs on its own; a slow lookup doesn't block the next one
                spawn(assistant.handle(text))
    finally:
        hidden.cancel()
        speech_in.stop_listening()
        for task in list(pending):
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)
        await assistant.close()


def main():
    load_dotenv()
    settings = Settings.from_env()
    setup_logging(settings.log_level)
    logger.info("Marvin booting...")
    try:
        asyncio.run(run(settings))
    except KeyboardInterrupt:
        pass
    logger.info("Marvin shutdown.")


if __name__ == "__main__":
    main()
