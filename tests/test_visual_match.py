import asyncio
import base64
import json

import pytest

from storefront.models.catalog import PRODUCTS
from storefront.services.visual_match import (
    FAILURE_MESSAGE,
    NO_MATCHES_MESSAGE,
    MatchState,
    VisualMatcher,
    parse_matches,
    resolve_products,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake"


@pytest.fixture
def matcher(gemini_client) -> VisualMatcher:
    return VisualMatcher(gemini_client, model="gemini-test", reset_delay=0.05)


def test_resolve_drops_unknown_ids_and_keeps_order():
    catalog_without_99 = [p for p in PRODUCTS if p.id != 99]
    found = resolve_products([2, 99, 5], catalog_without_99)
    assert [p.id for p in found] == [2, 5]


def test_parse_matches_rejects_schema_violations():
    assert parse_matches('{"productIds": [1, 2]}').product_ids == [1, 2]
    for bad in ('{"productIds": ["1"]}', '{"productIds": 3}', "not json", "[1, 2]"):
        with pytest.raises(ValueError):
            parse_matches(bad)


def test_non_image_upload_is_ignored(matcher):
    assert matcher.select_image(b"%PDF", "application/pdf") is False
    assert matcher.state is MatchState.IDLE
    assert matcher.image is None


def test_search_maps_ids_to_products(fake_gemini, matcher):
    fake_gemini.reply_text(json.dumps({"productIds": [2, 99, 5]}))
    matcher.select_image(PNG_BYTES, "image/png")

    results = asyncio.run(matcher.search())

    assert [p.id for p in results] == [2, 5]
    assert matcher.state is MatchState.RESULTS
    assert matcher.error is None


def test_search_request_carries_image_and_schema(fake_gemini, matcher):
    fake_gemini.reply_text('{"productIds": []}')
    matcher.select_image(PNG_BYTES, "image/png")
    asyncio.run(matcher.search())

    body = fake_gemini.bodies()[0]
    image_part, text_part = body["contents"][0]["parts"]
    assert image_part["inlineData"] == {"mimeType": "image/png", "data": base64.b64encode(PNG_BYTES).decode()}
    assert "productIds" in text_part["text"]
    assert body["generationConfig"]["responseMimeType"] == "application/json"
    assert body["generationConfig"]["responseSchema"]["properties"]["productIds"]["items"] == {"type": "INTEGER"}


def test_empty_ids_report_no_matches(fake_gemini, matcher):
    fake_gemini.reply_text('{"productIds": []}')
    matcher.select_image(PNG_BYTES, "image/jpeg")

    assert asyncio.run(matcher.search()) == []
    assert matcher.state is MatchState.ERROR
    assert matcher.error == NO_MATCHES_MESSAGE


def test_schema_violation_is_a_failure(fake_gemini, matcher):
    fake_gemini.reply_text('{"productIds": ["two"]}')
    matcher.select_image(PNG_BYTES, "image/png")

    asyncio.run(matcher.search())

    assert matcher.state is MatchState.ERROR
    assert matcher.error == FAILURE_MESSAGE


def test_transport_failure_is_a_failure(fake_gemini, matcher):
    fake_gemini.fail()
    matcher.select_image(PNG_BYTES, "image/png")

    asyncio.run(matcher.search())

    assert matcher.error == FAILURE_MESSAGE
    assert matcher.is_loading is False


def test_new_image_resets_from_any_state(fake_gemini, matcher):
    fake_gemini.reply_text('{"productIds": [1]}')
    matcher.select_image(PNG_BYTES, "image/png")
    asyncio.run(matcher.search())

    matcher.select_image(b"GIF89a", "image/gif")

    assert matcher.state is MatchState.IMAGE_SELECTED
    assert matcher.results == []
    assert matcher.mime_type == "image/gif"


def test_search_without_image_does_nothing(fake_gemini, matcher):
    assert asyncio.run(matcher.search()) == []
    assert fake_gemini.requests == []


def test_close_resets_after_delay(matcher):
    matcher.select_image(PNG_BYTES, "image/png")

    async def run():
        matcher.close()
        assert matcher.state is MatchState.IMAGE_SELECTED
        await asyncio.sleep(0.1)

    asyncio.run(run())
    assert matcher.state is MatchState.IDLE
    assert matcher.image is None


def test_selecting_cancels_pending_close(matcher):
    matcher.select_image(PNG_BYTES, "image/png")

    async def run():
        matcher.close()
        matcher.select_image(b"GIF89a", "image/gif")
        await asyncio.sleep(0.1)

    asyncio.run(run())
    assert matcher.state is MatchState.IMAGE_SELECTED


def test_close_outside_event_loop_resets_immediately(matcher):
    matcher.select_image(PNG_BYTES, "image/png")
    matcher.close()
    assert matcher.state is MatchState.IDLE
