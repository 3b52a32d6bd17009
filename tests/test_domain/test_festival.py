"""
Tests for Festival bucket list
"""
import pytest

from lifeboard.domain.errors import ValidationError
from lifeboard.domain.festival import Festival


@pytest.fixture
def festival(sample_account_id):
    return Festival(sample_account_id, name="New Year", description="party")


def test_totals(festival):
    tree = festival.add_item("Tree", 50)
    festival.add_item("Lights", 20.5)
    festival.add_item("Card")
    festival.update_item(tree.id, {"completed": True})

    assert festival.totals() == {"total": "70.5", "completed": "50", "remaining": "20.5"}


def test_negative_price_rejected(festival):
    with pytest.raises(ValidationError, match="Price cannot be negative"):
        festival.add_item("Tree", -1)
    assert len(festival.items) == 0


def test_label_required_and_limited(festival):
    with pytest.raises(ValidationError, match="Label is required"):
        festival.add_item("  ")
    with pytest.raises(ValidationError, match="200 characters"):
        festival.add_item("x" * 201)


def test_update_item_validation(festival):
    item = festival.add_item("Tree", 10)

    with pytest.raises(ValidationError, match="boolean"):
        festival.update_item(item.id, {"completed": "yes"})
    assert item.completed is False

    with pytest.raises(ValidationError):
        festival.update_item(item.id, {"id": "other"})


def test_update_root_fields(festival):
    festival.update(name="Christmas")
    assert festival.name == "Christmas"
    assert festival.description == "party"

    with pytest.raises(ValidationError, match="120 characters"):
        festival.update(name="x" * 121)


def test_item_timestamps_follow_updates(festival):
    item = festival.add_item("Tree", 10)
    created = item.updated_at

    festival.update_item(item.id, {"price": 12})

    assert item.updated_at >= created
    assert festival.updated_at >= item.updated_at
