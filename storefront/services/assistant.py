"""Chat assistant for a single shopper session.

Two sequences are kept: ``transcript`` is what the shopper sees, ``history``
is the ``contents`` list sent upstream. They only diverge on failure, where
the fallback apology is shown but never sent back to the model.
"""

import logging
from collections.abc import AsyncIterator

from storefront.models.catalog import assistant_manifest
from storefront.models.schemas import ChatMessage, Product
from storefront.services.gemini import GeminiClient, GeminiError, extract_text

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "I seem to be having trouble connecting. Please try again in a moment."


class AssistantBusyError(Exception):
    """A turn is already in flight for this session."""


def build_system_instruction(assistant_name: str, products: list[Product] | None = None) -> str:
    return (
        f"You are {assistant_name}, a friendly and expert AI shopping assistant for a luxury beauty brand. "
        "Help shoppers discover the right skincare and haircare products. You know every product listed "
        "below; use them to answer questions, recommend products and help shoppers find what they need. "
        f"Keep replies helpful, elegant and concise, in keeping with the {assistant_name} brand. "
        f"Available products in JSON format: {assistant_manifest(products)}"
    )


def _content(role: str, text: str) -> dict:
    return {"role": role, "parts": [{"text": text}]}


class AssistantSession:
    def __init__(
        self,
        client: GeminiClient,
        model: str,
        assistant_name: str = "Zephyra",
        products: list[Product] | None = None,
    ):
        self.client = client
        self.model = model
        self.assistant_name = assistant_name
        self.system_instruction = build_system_instruction(assistant_name, products)
        self.transcript: list[ChatMessage] = []
        self.history: list[dict] = []
        self.is_loading = False

    @property
    def greeting(self) -> str:
        return f"Hello! I am {self.assistant_name}, your personal beauty assistant. How can I help you today?"

    @property
    def config(self) -> dict:
        return {"systemInstruction": self.system_instruction}

    def open(self) -> None:
        """Start a conversation if none is showing yet."""
        if not self.transcript:
            self.history = []
            self.transcript.append(ChatMessage(role="assistant", text=self.greeting))

    def reset(self) -> None:
        self.transcript = []
        self.history = []
        self.is_loading = False

    def _begin_turn(self, text: str) -> bool:
        if not text or not text.strip():
            return False
        if self.is_loading:
            raise AssistantBusyError("A reply is already being generated")
        self.transcript.append(ChatMessage(role="user", text=text))
        self.history.append(_content("user", text))
        self.is_loading = True
        return True

    async def send(self, text: str) -> ChatMessage | None:
        """Send one shopper turn with the full history and append the reply.

        Returns the appended assistant message, or None for blank input.
        """
        if not self._begin_turn(text):
            return None
        try:
            response = await self.client.generate_content(self.model, list(self.history), self.config)
            reply_text = extract_text(response)
        except GeminiError:
            logger.exception("Assistant turn failed")
            reply = ChatMessage(role="assistant", text=FALLBACK_MESSAGE)
            self.transcript.append(reply)
            return reply
        finally:
            self.is_loading = False

        self.history.append(_content("model", reply_text))
        reply = ChatMessage(role="assistant", text=reply_text)
        self.transcript.append(reply)
        return reply

    def stream(self, text: str) -> AsyncIterator[str] | None:
        """Streaming variant of ``send``.

        The shopper turn is recorded and the session marked busy right away,
        so a second call raises ``AssistantBusyError`` before any reply
        starts. Returns an iterator of deltas, or None for blank input.
        """
        if not self._begin_turn(text):
            return None
        entry = ChatMessage(role="assistant", text="")
        self.transcript.append(entry)
        return self._stream_reply(entry)

    async def _stream_reply(self, entry: ChatMessage) -> AsyncIterator[str]:
        # The assistant entry's text is replaced in place as deltas arrive.
        reply_text = ""
        try:
            async for delta in self.client.stream_content(self.model, list(self.history), self.config):
                reply_text += delta
                entry.text = reply_text
                yield delta
        except GeminiError:
            logger.exception("Assistant stream failed")
            entry.text = FALLBACK_MESSAGE
            return
        finally:
            self.is_loading = False

        if not reply_text:
            logger.warning("Assistant stream ended without any text")
            entry.text = FALLBACK_MESSAGE
            return
        self.history.append(_content("model", reply_text))
