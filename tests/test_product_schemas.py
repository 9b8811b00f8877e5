"""Tests for product schemas and timestamp helpers."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from app.models.base import next_timestamp
from app.schemas.product import Product, ProductUpdate
from tests.conftest import product_payload


def test_new_product_defaults_rating_and_reviews():
    now = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)

    product = Product.new(product_payload(), now)

    assert product.id is None
    assert product.rating == 4.5
    assert product.reviews == 0
    assert product.created_at == now
    assert product.updated_at == now


def test_new_product_keeps_supplied_rating():
    product = Product.new(product_payload(rating=4.8, reviews=12), datetime.now(UTC))

    assert product.rating == 4.8
    assert product.reviews == 12


def test_sizes_are_deduplicated_in_order():
    payload = product_payload(sizes=["M", "S", "M", "L", "S"])

    assert payload.sizes == ["M", "S", "L"]


@pytest.mark.parametrize(
    "overrides",
    [
        {"price": -1},
        {"name": ""},
        {"category": "Shoes"},
        {"colors": [{"name": "Red"}]},
    ],
)
def test_invalid_payload_rejected(overrides):
    with pytest.raises(ValidationError):
        product_payload(**overrides)


def test_update_changes_only_include_set_fields():
    update = ProductUpdate.model_validate({"price": 10, "images": None})

    assert update.changes() == {"price": 10.0}


def test_update_changes_serialise_nested_values():
    update = ProductUpdate.model_validate(
        {"category": "Hoodies", "colors": [{"name": "Gray", "value": "#6B7280"}]}
    )

    assert update.changes() == {
        "category": "Hoodies",
        "colors": [{"name": "Gray", "value": "#6B7280"}],
    }


def test_merged_applies_changes_and_keeps_the_rest():
    original = Product.new(product_payload(), datetime.now(UTC)).model_copy(update={"id": "p1"})

    merged = original.merged({"price": 10})

    assert merged.price == 10
    assert merged.name == original.name
    assert merged.sizes == original.sizes
    assert merged.images == original.images
    assert merged.id == "p1"
    assert merged.created_at == original.created_at
    assert merged.updated_at > original.updated_at


def test_merged_ignores_server_fields():
    original = Product.new(product_payload(), datetime.now(UTC)).model_copy(update={"id": "p1"})

    merged = original.merged({"id": "other", "created_at": "2000-01-01T00:00:00Z"})

    assert merged.id == "p1"
    assert merged.created_at == original.created_at


def test_document_excludes_id_and_timestamps():
    product = Product.new(product_payload(), datetime.now(UTC)).model_copy(update={"id": "p1"})

    document = product.document()

    assert "id" not in document
    assert "created_at" not in document
    assert "updated_at" not in document
    assert document["category"] == "Jackets"
    assert document["colors"] == [{"name": "Blue", "value": "#1E3A8A"}]


def test_naive_timestamps_are_read_as_utc():
    product = Product.model_validate(
        {
            **product_payload().model_dump(),
            "id": "p1",
            "created_at": datetime(2024, 1, 1, 8, 30),
            "updated_at": datetime(2024, 1, 1, 8, 30),
        }
    )

    assert product.created_at.tzinfo is not None
    assert product.created_at.utcoffset() == timedelta(0)


def test_next_timestamp_is_strictly_increasing_when_clock_lags():
    future = datetime.now(UTC) + timedelta(hours=1)

    assert next_timestamp(future) == future + timedelta(microseconds=1)


def test_next_timestamp_without_previous_is_now():
    before = datetime.now(UTC)

    assert next_timestamp(None) >= before
