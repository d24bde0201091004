from decimal import Decimal

import pytest

from factories import item, participant
from splitroom.errors import DegenerateRoom
from splitroom.models import ReceiptItem, SharedCharges
from splitroom.services.split import compute_shares, format_amount, split_amount

PARTICIPANTS = [participant("a"), participant("b"), participant("c")]


def test_split_amount_even():
    shares = split_amount(Decimal("300"), ["a", "b"])
    assert shares == {"a": Decimal("150"), "b": Decimal("150")}


def test_split_amount_requires_consumers():
    with pytest.raises(ValueError):
        split_amount(Decimal("10"), [])


def test_pizza_tagged_by_two():
    items = [item(0, "Pizza", "300", tags={"a", "b"})]
    shares = compute_shares(items, PARTICIPANTS, SharedCharges(service_charge=Decimal("30")))
    assert shares == {"a": Decimal("160"), "b": Decimal("160"), "c": Decimal("10")}


def test_untagged_pizza_only_splits_shared_charges():
    items = [item(0, "Pizza", "300")]
    shares = compute_shares(items, PARTICIPANTS, SharedCharges(service_charge=Decimal("30")))
    assert shares == {"a": Decimal("10"), "b": Decimal("10"), "c": Decimal("10")}


def test_pizza_tagged_by_everyone():
    items = [item(0, "Pizza", "300", tags={"a", "b", "c"})]
    shares = compute_shares(items, PARTICIPANTS, SharedCharges(service_charge=Decimal("30")))
    assert shares == {"a": Decimal("110"), "b": Decimal("110"), "c": Decimal("110")}


def test_table_is_total_for_room():
    shares = compute_shares([], PARTICIPANTS, SharedCharges())
    assert list(shares) == ["a", "b", "c"]
    assert all(value == 0 for value in shares.values())


def test_untagged_item_changes_nothing():
    charges = SharedCharges(service_charge=Decimal("12.50"), taxes={"cgst": Decimal("4.5")})
    base = [item(0, "Naan", "80", tags={"a"}), item(1, "Dal", "220", tags={"b", "c"})]
    with_untagged = base + [item(2, "Lassi", "90")]
    assert compute_shares(base, PARTICIPANTS, charges) == compute_shares(with_untagged, PARTICIPANTS, charges)


def test_conservation_when_everything_is_tagged():
    charges = SharedCharges(
        service_charge=Decimal("41.30"),
        taxes={"cgst": Decimal("20.65"), "sgst": Decimal("20.65")},
    )
    items = [
        item(0, "Paneer Tikka", "289", tags={"a", "b", "c"}),
        item(1, "Biryani", "349.50", tags={"b"}),
        item(2, "Coke", "100", tags={"a", "c"}),
        item(3, "Kulfi", "137", tags={"a", "b", "c"}),
    ]
    shares = compute_shares(items, PARTICIPANTS, charges)

    expected = sum((i.line_total for i in items), Decimal("0")) + charges.total
    assert abs(sum(shares.values()) - expected) < Decimal("0.01")


def test_shared_charges_split_evenly_across_room():
    charges = SharedCharges(service_charge=Decimal("10"), taxes={"cgst": Decimal("5"), "sgst": Decimal("5")})
    items = [item(0, "Thali", "500", tags={"a"})]
    shares = compute_shares(items, PARTICIPANTS, charges)

    per_person = Decimal("20") / 3
    assert shares["b"] == per_person
    assert shares["c"] == per_person
    assert shares["a"] == Decimal("500") + per_person


def test_no_rounding_before_sum():
    items = [item(i, f"Item {i}", "1", tags={"a", "b", "c"}) for i in range(3)]
    shares = compute_shares(items, PARTICIPANTS, SharedCharges())
    assert format_amount(shares["a"]) == "1.00"


def test_line_total_is_not_recomputed_from_quantity():
    discounted = ReceiptItem(
        index=0,
        name="Beer",
        quantity=Decimal("3"),
        unit_price=Decimal("100"),
        line_total=Decimal("250"),
        tags=frozenset({"a"}),
    )
    shares = compute_shares([discounted], PARTICIPANTS, SharedCharges())
    assert shares["a"] == Decimal("250")


def test_unknown_tag_is_skipped():
    items = [item(0, "Pizza", "300", tags={"a", "ghost"})]
    shares = compute_shares(items, PARTICIPANTS, SharedCharges())
    assert shares == {"a": Decimal("150"), "b": Decimal("0"), "c": Decimal("0")}
    assert "ghost" not in shares


def test_empty_room_is_degenerate():
    with pytest.raises(DegenerateRoom):
        compute_shares([], [], SharedCharges(service_charge=Decimal("10")))


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (Decimal("10"), "10.00"),
        (Decimal("10") / 3, "3.33"),
        (Decimal("20") / 3, "6.67"),
        (Decimal("0.005"), "0.01"),
    ],
)
def test_format_amount(amount, expected):
    assert format_amount(amount) == expected
