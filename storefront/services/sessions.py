import logging
import uuid
from datetime import datetime, timezone

from storefront.config import Settings
from storefront.models.schemas import SessionInfo, User
from storefront.services.assistant import AssistantSession
from storefront.services.cart import CartLedger
from storefront.services.checkout import CheckoutCalculator
from storefront.services.gemini import GeminiClient
from storefront.services.visual_match import VisualMatcher

logger = logging.getLogger(__name__)


class SessionNotFoundError(Exception):
    pass


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class ShopperSession:
    """All state for one shopper. The only owner of their cart, user and chat."""

    def __init__(self, session_id: str, client: GeminiClient, settings: Settings):
        self.id = session_id
        self.created_at = _now()
        self.updated_at = self.created_at
        self.user: User | None = None
        self.cart = CartLedger()
        self.checkout = CheckoutCalculator(
            self.cart,
            delivery_charge=settings.DELIVERY_CHARGE,
            coupon_code=settings.COUPON_CODE,
            coupon_rate=settings.COUPON_RATE,
        )
        self.assistant = AssistantSession(client, settings.GEMINI_MODEL, settings.ASSISTANT_NAME)
        self.image_search = VisualMatcher(client, settings.GEMINI_MODEL, reset_delay=settings.IMAGE_SEARCH_RESET_DELAY)

    def touch(self) -> None:
        self.updated_at = _now()

    def info(self) -> SessionInfo:
        return SessionInfo(
            session_id=self.id,
            created_at=self.created_at,
            last_active=self.updated_at,
            item_count=self.cart.item_count,
            user=self.user,
        )


class SessionRegistry:
    """In-memory shopper sessions. Nothing survives a restart."""

    def __init__(self, client: GeminiClient, settings: Settings):
        self.client = client
        self.settings = settings
        self._sessions: dict[str, ShopperSession] = {}

    def create(self) -> ShopperSession:
        session = ShopperSession(str(uuid.uuid4()), self.client, self.settings)
        self._sessions[session.id] = session
        logger.info("Created session %s", session.id)
        return session

    def get(self, session_id: str) -> ShopperSession:
        session = self._sessions.get(session_id)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    def list_sessions(self, limit: int = 20, offset: int = 0) -> list[ShopperSession]:
        """Sessions, most recently active first."""
        ordered = sorted(self._sessions.values(), key=lambda s: s.updated_at, reverse=True)
        return ordered[offset:offset + limit]

    def end(self, session_id: str) -> None:
        session = self._sessions.pop(session_id, None)
        if session is None:
            raise SessionNotFoundError(session_id)
        session.assistant.reset()
        session.image_search.reset()
        logger.info("Ended session %s", session_id)
