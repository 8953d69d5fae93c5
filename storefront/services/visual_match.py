"""Search the catalog by photo.

The image and a compact product manifest go to the model with a JSON
response schema; the returned ids are mapped back onto catalog products.

State moves ``idle -> image_selected -> searching -> results | error``.
Selecting a new image from any state goes back to ``image_selected``;
closing resets to ``idle`` after a short delay.
"""

import asyncio
import base64
import logging
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from storefront.models.catalog import PRODUCTS, visual_manifest
from storefront.models.schemas import ImageSearchView, Product
from storefront.services.gemini import GeminiClient, GeminiError, extract_text

logger = logging.getLogger(__name__)

NO_MATCHES_MESSAGE = "No similar products found in our collection."
FAILURE_MESSAGE = "Sorry, we couldn't process your image. Please try again."
MAX_MATCHES = 3

RESPONSE_SCHEMA = {
    "type": "OBJECT",
    "properties": {
        "productIds": {
            "type": "ARRAY",
            "items": {"type": "INTEGER"},
        },
    },
}


class MatchState(str, Enum):
    IDLE = "idle"
    IMAGE_SELECTED = "image_selected"
    SEARCHING = "searching"
    RESULTS = "results"
    ERROR = "error"


class ProductMatches(BaseModel):
    """The structured reply. Anything that does not fit is a parse failure."""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    product_ids: list[int] = Field(default_factory=list, alias="productIds")


def parse_matches(text: str) -> ProductMatches:
    return ProductMatches.model_validate_json(text.strip())


def resolve_products(product_ids: list[int], products: list[Product]) -> list[Product]:
    """Map ids to products in the order given, dropping ids not in the catalog."""
    by_id = {product.id: product for product in products}
    return [by_id[pid] for pid in product_ids if pid in by_id]


def build_prompt(products: list[Product]) -> str:
    return (
        "Analyze the product in this image. Compare it to the following list of products and identify "
        f"the top {MAX_MATCHES} most similar items based on appearance, product type, and potential use. "
        "Respond ONLY with a JSON object containing a single key 'productIds' which is an array of the "
        "matching product IDs (as numbers). If no relevant products are found, return an empty array. "
        f"Product List: {visual_manifest(products)}"
    )


def is_image(mime_type: str | None) -> bool:
    return bool(mime_type) and mime_type.startswith("image/")


class VisualMatcher:
    def __init__(
        self,
        client: GeminiClient,
        model: str,
        products: list[Product] | None = None,
        reset_delay: float = 0.3,
    ):
        self.client = client
        self.model = model
        self.products = PRODUCTS if products is None else products
        self.reset_delay = reset_delay
        self.state = MatchState.IDLE
        self.image: bytes | None = None
        self.mime_type: str | None = None
        self.results: list[Product] = []
        self.error: str | None = None
        self._generation = 0
        self._pending_reset: asyncio.TimerHandle | None = None

    @property
    def is_loading(self) -> bool:
        return self.state is MatchState.SEARCHING

    def view(self) -> ImageSearchView:
        return ImageSearchView(
            state=self.state.value,
            has_image=self.image is not None,
            mime_type=self.mime_type,
            error=self.error,
            results=self.results,
        )

    # -- State transitions --

    def reset(self) -> None:
        self._generation += 1
        self._pending_reset = None
        self.state = MatchState.IDLE
        self.image = None
        self.mime_type = None
        self.results = []
        self.error = None

    def select_image(self, data: bytes, mime_type: str | None) -> bool:
        """Select an image to search with. Non-image uploads are ignored."""
        if not is_image(mime_type):
            logger.debug("Ignoring non-image upload of type %r", mime_type)
            return False
        self._cancel_pending_reset()
        self.reset()
        self.image = data
        self.mime_type = mime_type
        self.state = MatchState.IMAGE_SELECTED
        return True

    def close(self) -> None:
        """Reset to idle once the closing delay has passed."""
        self._cancel_pending_reset()
        if self.reset_delay <= 0:
            self.reset()
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self.reset()
            return
        self._pending_reset = loop.call_later(self.reset_delay, self.reset)

    def _cancel_pending_reset(self) -> None:
        if self._pending_reset is not None:
            self._pending_reset.cancel()
            self._pending_reset = None

    # -- Search --

    def build_request(self) -> tuple[dict, dict]:
        contents = {
            "parts": [
                {"inlineData": {"mimeType": self.mime_type, "data": base64.b64encode(self.image).decode("ascii")}},
                {"text": build_prompt(self.products)},
            ]
        }
        config = {"responseMimeType": "application/json", "responseSchema": RESPONSE_SCHEMA}
        return contents, config

    async def search(self) -> list[Product]:
        if self.image is None or self.is_loading:
            return self.results
        generation = self._generation
        self.state = MatchState.SEARCHING
        self.error = None
        self.results = []

        contents, config = self.build_request()
        try:
            response = await self.client.generate_content(self.model, contents, config)
            matches = parse_matches(extract_text(response))
        except (GeminiError, ValidationError) as exc:
            if generation == self._generation:
                logger.warning("Image search failed: %s", exc)
                self.error = FAILURE_MESSAGE
                self.state = MatchState.ERROR
            return []

        if generation != self._generation:
            # The search was reset or replaced while the call was in flight.
            logger.debug("Discarding stale image search result")
            return []

        self.results = resolve_products(matches.product_ids, self.products)
        if not self.results:
            self.error = NO_MATCHES_MESSAGE
            self.state = MatchState.ERROR
        else:
            self.state = MatchState.RESULTS
        return self.results
