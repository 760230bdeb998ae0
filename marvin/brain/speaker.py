import logging
from typing import Callable, List, Optional

from marvin.bus.messages import ConversationMessage

logger = logging.getLogger(__name__)

ASSISTANT = "Marvin"
USER = "You"


class Conversation:
    """Append-only log of what was shown, in completion order."""

    def __init__(self, on_message: Optional[Callable[[ConversationMessage], None]] = None):
        self.messages: List[ConversationMessage] = []
        self.on_message = on_message

    def add(self, sender: str, text: str) -> ConversationMessage:
        msg = ConversationMessage(sender=sender, text=text)
        self.messages.append(msg)
        if self.on_message is not None:
            self.on_message(msg)
        return msg

    def replies(self) -> List[str]:
        return [m.text for m in self.messages if m.sender == ASSISTANT]


class Responder:
    """
    Every answer goes through say(): shown in the conversation and spoken.
    say() returns once speech has finished, so callers can chain
    "speak A, then speak B, then act".
    """

    def __init__(self, conversation: Conversation, voice=None):
        self.conversation = conversation
        self.voice = voice

    def show(self, text: str) -> None:
        self.conversation.add(ASSISTANT, text)

    def heard(self, text: str) -> None:
        self.conversation.add(USER, text)

    async def say(self, text: str) -> str:
        self.show(text)
        if self.voice is not None:
            await self.voice.speak(text)
        return text
