import re
from datetime import date, datetime, time
from decimal import MAX_EMAX, MAX_PREC, MIN_EMIN, ROUND_CEILING, Context, Decimal, localcontext
from typing import Dict

from receipt import MalformedAmount, Receipt, ValidationError, items_of

RECEIPT_DATE_FORMAT = '%Y-%m-%d'
RECEIPT_TIME_FORMAT = '%H:%M'
RECEIPT_DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
RECEIPT_TIME_PATTERN = re.compile(r"[0-9]{2}:[0-9]{2}")
AMOUNT_PATTERN = re.compile(r"[0-9]+(\.[0-9]*)?|\.[0-9]+")
RETAILER_COUNTED_CHARACTER = re.compile(r"[A-Za-z0-9]")
POINTS_RETAILER_NAME_ALPHANUM_CHARACTER = 1
POINTS_TOTAL_HAS_NO_CENTS = 50
POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS = 25
POINTS_ITEMS_COUNT = 5
POINTS_ITEM_DESCRIPTION = Decimal("0.2")
POINTS_ODD_PURCHASE_DAY = 6
POINTS_VALID_PURCHASE_TIME = 10
QUARTER = Decimal("0.25")
REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR = 3
REWARD_TIME_START = time(14, 0)
REWARD_TIME_END = time(16, 0)

# multiplication and remainder are exact at this precision
EXACT = Context(prec=MAX_PREC, Emax=MAX_EMAX, Emin=MIN_EMIN)


def validate_retailer_name(retailer_name):
    """ Validates that the retailer name is a non-empty string """
    if not isinstance(retailer_name, str) or retailer_name == "":
        raise ValidationError("retailer name", retailer_name)


def parse_purchase_date(purchase_date) -> date:
    """ Parses a strict YYYY-MM-DD date, rejecting impossible calendar dates """
    if not isinstance(purchase_date, str) or not RECEIPT_DATE_PATTERN.fullmatch(purchase_date):
        raise ValidationError("purchase date", purchase_date)
    try:
        return datetime.strptime(purchase_date, RECEIPT_DATE_FORMAT).date()
    except ValueError:
        raise ValidationError("purchase date", purchase_date)


def parse_purchase_time(purchase_time) -> time:
    """ Parses a strict 24-hour HH:MM time """
    # strptime alone accepts single-digit hours
    if not isinstance(purchase_time, str) or not RECEIPT_TIME_PATTERN.fullmatch(purchase_time):
        raise ValidationError("purchase time", purchase_time)
    try:
        return datetime.strptime(purchase_time, RECEIPT_TIME_FORMAT).time()
    except ValueError:
        raise ValidationError("purchase time", purchase_time)


def parse_amount(field: str, amount) -> Decimal:
    """ Parses a non-negative exact decimal numeral such as "35.35" or "9" """
    if not isinstance(amount, str) or not AMOUNT_PATTERN.fullmatch(amount):
        raise MalformedAmount(field, amount)
    return Decimal(amount)


def validate(receipt: Receipt) -> None:
    """
    Validates the fields a receipt must get right before it is accepted.
    Amounts and items are checked by the scorer instead.

    Raises:
        ValidationError naming the first field that failed
    """
    validate_retailer_name(receipt.retailer)
    parse_purchase_date(receipt.purchaseDate)
    parse_purchase_time(receipt.purchaseTime)


def score_retailer(retailer_name: str) -> int:
    return len(RETAILER_COUNTED_CHARACTER.findall(retailer_name)) * POINTS_RETAILER_NAME_ALPHANUM_CHARACTER


def score_round_total(total: str) -> int:
    parsed_total = parse_amount("receipt total", total)
    if parsed_total == parsed_total.to_integral_value():
        return POINTS_TOTAL_HAS_NO_CENTS
    return 0


def score_quarter_total(total: str) -> int:
    parsed_total = parse_amount("receipt total", total)
    with localcontext(EXACT):
        if parsed_total % QUARTER == 0:
            return POINTS_TOTAL_IS_MULTIPLE_OF_QUARTERS
    return 0


def score_item_pairs(receipt: Receipt) -> int:
    return (len(items_of(receipt)) // 2) * POINTS_ITEMS_COUNT


def score_item_descriptions(receipt: Receipt) -> int:
    """
    Awards ceil(price * 0.2) for every item whose trimmed description length
    is a multiple of 3. An empty description has length 0 and qualifies.
    """
    points = 0
    for item in items_of(receipt):
        price = parse_amount("item price", item.price)
        if len(item.shortDescription.strip()) % REWARD_ITEM_DESCRIPTION_LENGTH_FACTOR == 0:
            with localcontext(EXACT):
                points += int((price * POINTS_ITEM_DESCRIPTION).to_integral_value(rounding=ROUND_CEILING))
    return points


def score_purchase_day(purchase_date: str) -> int:
    if parse_purchase_date(purchase_date).day % 2 != 0:
        return POINTS_ODD_PURCHASE_DAY
    return 0


def score_purchase_time(purchase_time: str) -> int:
    if REWARD_TIME_START < parse_purchase_time(purchase_time) < REWARD_TIME_END:
        return POINTS_VALID_PURCHASE_TIME
    return 0


def score_breakdown(receipt: Receipt) -> Dict[str, int]:
    """ Calculates the points earned by each rule, keyed by rule name """
    return {
        "retailer": score_retailer(receipt.retailer),
        "round_total": score_round_total(receipt.total),
        "quarter_total": score_quarter_total(receipt.total),
        "item_pairs": score_item_pairs(receipt),
        "item_descriptions": score_item_descriptions(receipt),
        "purchase_day": score_purchase_day(receipt.purchaseDate),
        "purchase_time": score_purchase_time(receipt.purchaseTime),
    }


def score(receipt: Receipt) -> int:
    """
    Calculates the points earned by a validated receipt.

    Raises:
        MalformedAmount if the total or an item price is not a decimal numeral
        ScoringError if the items cannot be read
    """
    return sum(score_breakdown(receipt).values())


def check_scorable(receipt: Receipt) -> None:
    """ Raises the error score() would raise, without keeping the result """
    score_breakdown(receipt)
