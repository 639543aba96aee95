### tests/unit/intents/test_parser.py
import json

import pytest

from verona_voice.intents.parser import MalformedReplyError, parse_intent_reply
from verona_voice.intents.types import (
    AddToCart,
    AnswerFaq,
    ErrorIntent,
    GeneralQuery,
    GetProductRecommendation,
    NavigateToCheckout,
    NavigateToProduct,
)


def test_parse_add_to_cart_camel_case_keys():
    reply = '{"intent": "ADD_TO_CART", "productId": "d1", "productName": "Summer Dress", "message": "Adding Summer Dress."}'
    response = parse_intent_reply(reply)
    assert isinstance(response, AddToCart)
    assert response.product_id == "d1"
    assert response.product_name == "Summer Dress"
    assert response.quantity == 1


def test_parse_add_to_cart_quantity_and_numeric_id():
    response = parse_intent_reply('{"intent": "ADD_TO_CART", "productId": 2319076, "quantity": 3, "message": "Three it is."}')
    assert isinstance(response, AddToCart)
    assert response.product_id == "2319076"
    assert response.quantity == 3


def test_parse_add_to_cart_null_quantity_defaults_to_one():
    response = parse_intent_reply('{"intent": "ADD_TO_CART", "productId": "d1", "quantity": null, "message": "Ok."}')
    assert response.quantity == 1


@pytest.mark.parametrize("quantity", ["0", "-2", "1.5", '"one"', "true", "[]"])
def test_parse_add_to_cart_unusable_quantity_defaults_to_one(quantity: str):
    reply = f'{{"intent": "ADD_TO_CART", "productId": "2319076", "quantity": {quantity}, "message": "Adding it."}}'
    response = parse_intent_reply(reply)
    assert isinstance(response, AddToCart)
    assert response.product_id == "2319076"
    assert response.quantity == 1
    assert response.message == "Adding it."


@pytest.mark.parametrize(("quantity", "expected"), [('"4"', 4), ("2.0", 2)])
def test_parse_add_to_cart_whole_number_quantity_is_kept(quantity: str, expected: int):
    reply = f'{{"intent": "ADD_TO_CART", "productId": "d1", "quantity": {quantity}, "message": "Ok."}}'
    assert parse_intent_reply(reply).quantity == expected


def test_parse_recommendation_defaults_lists():
    response = parse_intent_reply('{"intent": "GET_PRODUCT_RECOMMENDATION", "query": "a dress", "message": "Try our dresses!"}')
    assert isinstance(response, GetProductRecommendation)
    assert response.suggested_product_ids == []
    assert response.suggested_keywords == []


def test_parse_recommendation_null_lists_and_blank_entries():
    reply = json.dumps({
        "intent": "GET_PRODUCT_RECOMMENDATION",
        "suggestedProductIds": ["d1", "", None, 42],
        "suggestedKeywords": None,
        "message": "Here are some ideas.",
    })
    response = parse_intent_reply(reply)
    assert response.suggested_product_ids == ["d1", "42"]
    assert response.suggested_keywords == []
    assert response.query is None


@pytest.mark.parametrize(
    "payload, expected_type",
    [
        ({"intent": "NAVIGATE_TO_PRODUCT", "productName": "Linen Shirt", "message": "Sure."}, NavigateToProduct),
        ({"intent": "ANSWER_FAQ", "questionKey": "faq1", "answer": "30 days.", "message": "30 days."}, AnswerFaq),
        ({"intent": "NAVIGATE_TO_CHECKOUT", "message": "Heading to checkout."}, NavigateToCheckout),
        ({"intent": "GENERAL_QUERY", "message": "Happy to help."}, GeneralQuery),
        ({"intent": "ERROR", "message": "Something went wrong."}, ErrorIntent),
    ],
)
def test_parse_each_variant(payload, expected_type):
    assert isinstance(parse_intent_reply(json.dumps(payload)), expected_type)


def test_fenced_reply_parses_like_unfenced():
    body = '{"intent": "GET_PRODUCT_RECOMMENDATION", "query": "summer", "suggestedProductIds": ["d1"], "message": "Summer Dress!"}'
    assert parse_intent_reply(f"```json\n{body}\n```") == parse_intent_reply(body)


def test_message_is_stripped():
    response = parse_intent_reply('{"intent": "GENERAL_QUERY", "message": "  Hello there.  "}')
    assert response.message == "Hello there."


@pytest.mark.parametrize(
    "reply",
    [
        "",
        "I think you want a dress.",
        "[1, 2, 3]",
        '{"message": "No tag here."}',
        '{"intent": "BUY_EVERYTHING", "message": "Unknown tag."}',
        '{"intent": "GENERAL_QUERY"}',
        '{"intent": "GENERAL_QUERY", "message": "   "}',
        '{"intent": "GENERAL_QUERY", "message": 42}',
    ],
)
def test_malformed_replies_raise(reply: str):
    with pytest.raises(MalformedReplyError) as exc_info:
        parse_intent_reply(reply)
    assert exc_info.value.raw_text == reply


def test_validation_errors_are_attached():
    with pytest.raises(MalformedReplyError) as exc_info:
        parse_intent_reply('{"intent": "ADD_TO_CART", "productId": "d1", "message": "  "}')
    assert exc_info.value.errors
