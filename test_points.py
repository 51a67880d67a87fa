import pytest
from datetime import date, time
from decimal import Decimal
from typing import Optional, Tuple, get_type_hints
from points import (check_scorable, parse_amount, parse_purchase_date, parse_purchase_time, score,
                    score_breakdown, validate)
from receipt import MalformedAmount, Receipt, ReceiptItem, ScoringError, ValidationError


def make_receipt(**overrides):
    fields = {
        "retailer": "Target",
        "purchaseDate": "2022-01-02",
        "purchaseTime": "13:13",
        "items": (),
        "total": "1.01",
    }
    fields.update(overrides)
    return Receipt(**fields)


def items(*pairs):
    return tuple(ReceiptItem(shortDescription=d, price=p) for d, p in pairs)


example_receipt = make_receipt(
    purchaseDate="2022-01-01",
    purchaseTime="13:01",
    total="35.35",
    items=items(
        ("Mountain Dew 12PK", "6.49"),
        ("Emils Cheese Pizza", "12.25"),
        ("Knorr Creamy Chicken", "1.26"),
        ("Doritos Nacho Cheese", "3.35"),
        ("Klarbrunn 12-PK 12 FL OZ", "12.00"),
    ),
)


def test_example_receipt_breakdown():
    assert score_breakdown(example_receipt) == {
        "retailer": 6,
        "round_total": 0,
        "quarter_total": 0,
        "item_pairs": 10,
        "item_descriptions": 6,
        "purchase_day": 6,
        "purchase_time": 0,
    }
    assert score(example_receipt) == 28


def test_score_is_deterministic():
    assert len({score(example_receipt) for _ in range(20)}) == 1


@pytest.mark.parametrize("retailer, expected", [
    ("Target", 6),
    ("M&M Corner Market", 14),
    ("   ", 0),
    ("Café 7-Eleven!", 10),
])
def test_retailer_alphanumerics(retailer, expected):
    assert score_breakdown(make_receipt(retailer=retailer))["retailer"] == expected


@pytest.mark.parametrize("total, expected", [
    ("35.00", 75),
    ("9.00", 75),
    ("10.00", 75),
    ("100", 75),
    ("0", 75),
    ("1.01", 0),
    ("0.25", 25),
    ("12.50", 25),
    ("12.5", 25),
    ("35.35", 0),
    ("123456789012345678901234567890.75", 25),
    ("123456789012345678901234567890.000", 75),
])
def test_total_rules(total, expected):
    breakdown = score_breakdown(make_receipt(total=total))
    assert breakdown["round_total"] + breakdown["quarter_total"] == expected


@pytest.mark.parametrize("count, expected", [(0, 0), (1, 0), (2, 5), (4, 10), (5, 10)])
def test_item_pairs(count, expected):
    receipt = make_receipt(items=items(*[("Gatorade", "2.25")] * count))
    assert score_breakdown(receipt)["item_pairs"] == expected


@pytest.mark.parametrize("description, price, expected", [
    ("Emils Cheese Pizza", "12.25", 3),
    ("   Klarbrunn 12-PK 12 FL OZ  ", "12.00", 3),
    ("Dasani", "1.40", 1),
    ("Dasani", "5.00", 1),
    ("Dasani", "5.05", 2),
    ("Dasani", "0.00", 0),
    ("Gatorade", "2.25", 0),
    ("", "10.00", 2),
    ("     ", "10.00", 2),
])
def test_item_descriptions(description, price, expected):
    receipt = make_receipt(items=items((description, price)))
    assert score_breakdown(receipt)["item_descriptions"] == expected


@pytest.mark.parametrize("purchase_date, expected", [
    ("2022-01-02", 0),
    ("2022-01-01", 6),
    ("2024-02-29", 6),
    ("2022-12-31", 6),
])
def test_purchase_day(purchase_date, expected):
    assert score_breakdown(make_receipt(purchaseDate=purchase_date))["purchase_day"] == expected


@pytest.mark.parametrize("purchase_time, expected", [
    ("13:01", 0),
    ("14:00", 0),
    ("14:01", 10),
    ("15:59", 10),
    ("16:00", 0),
    ("23:59", 0),
])
def test_purchase_time(purchase_time, expected):
    assert score_breakdown(make_receipt(purchaseTime=purchase_time))["purchase_time"] == expected


def test_validate_accepts_example_receipt():
    assert validate(example_receipt) is None


@pytest.mark.parametrize("overrides, field", [
    ({"retailer": ""}, "retailer name"),
    ({"retailer": None}, "retailer name"),
    ({"purchaseDate": "2022-13-01"}, "purchase date"),
    ({"purchaseDate": "2023-02-29"}, "purchase date"),
    ({"purchaseDate": "22-01-01"}, "purchase date"),
    ({"purchaseTime": "2:00 PM"}, "purchase time"),
    ({"purchaseTime": "12:60"}, "purchase time"),
    ({"purchaseTime": "12:00:00"}, "purchase time"),
])
def test_validate_rejects(overrides, field):
    with pytest.raises(ValidationError) as e:
        validate(make_receipt(**overrides))
    assert e.value.field == field
    assert str(e.value) == f"Error: invalid receipt {field} ({e.value.value})"


def test_validate_ignores_amounts_and_items():
    receipt = make_receipt(total="abc", items=None)
    validate(receipt)
    with pytest.raises(ScoringError):
        score(receipt)


def test_whitespace_retailer_is_valid():
    validate(make_receipt(retailer="   "))


def test_malformed_total():
    with pytest.raises(MalformedAmount) as e:
        score(make_receipt(total="35,35"))
    assert e.value.field == "receipt total"
    assert e.value.value == "35,35"


def test_malformed_price_even_when_description_does_not_qualify():
    with pytest.raises(MalformedAmount):
        check_scorable(make_receipt(items=items(("Gatorade", "two"))))


def test_malformed_amount_is_a_scoring_error():
    assert issubclass(MalformedAmount, ScoringError)
    assert issubclass(ScoringError, ValueError)


def test_parse_amount_is_exact():
    assert parse_amount("item price", "12.25") == Decimal("12.25")
    assert parse_amount("item price", ".5") == Decimal("0.5")


def test_parse_date_and_time():
    assert parse_purchase_date("2022-03-20") == date(2022, 3, 20)
    assert parse_purchase_time("08:13") == time(8, 13)


def test_receipt_from_json():
    receipt = Receipt.from_json({
        "retailer": "Target",
        "purchaseDate": "2022-01-01",
        "purchaseTime": "13:01",
        "items": [{"shortDescription": "Dasani", "price": "1.40"}, 25],
        "total": "1.40",
    })
    assert receipt.items == (ReceiptItem("Dasani", "1.40"), 25)
    assert Receipt.from_json({}).retailer is None
    with pytest.raises(ValidationError):
        Receipt.from_json(["not", "an", "object"])


@pytest.mark.parametrize("amount", ["1.25\n", " 1.25", "1.25 ", "١٢.٥٠", "１２.５０", "NaN", "Infinity", "+1.25"])
def test_parse_amount_rejects_non_ascii_and_padded_numerals(amount):
    with pytest.raises(MalformedAmount):
        parse_amount("receipt total", amount)


@pytest.mark.parametrize("overrides, field", [
    ({"purchaseDate": "2022-01-01\n"}, "purchase date"),
    ({"purchaseDate": "２０２２-０１-０１"}, "purchase date"),
    ({"purchaseTime": "14:30\n"}, "purchase time"),
    ({"purchaseTime": "１４:３０"}, "purchase time"),
])
def test_validate_rejects_padded_and_non_ascii_digits(overrides, field):
    with pytest.raises(ValidationError) as e:
        validate(make_receipt(**overrides))
    assert e.value.field == field


def test_receipt_fields_are_typed_as_text():
    hints = get_type_hints(Receipt)
    assert hints["retailer"] == hints["total"] == Optional[str]
    assert hints["items"] == Optional[Tuple[ReceiptItem, ...]]
    assert get_type_hints(ReceiptItem) == {"shortDescription": Optional[str], "price": Optional[str]}
