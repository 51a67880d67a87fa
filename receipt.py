from dataclasses import dataclass
from typing import Any, Optional, Tuple


class ReceiptError(ValueError):
    """ Base class for every error caused by the content of a submitted receipt """


class ValidationError(ReceiptError):
    """ Raised when a receipt fails validation and must not be stored """

    def __init__(self, field: str, value: Any, reason: Optional[str] = None):
        self.field = field
        self.value = value
        super().__init__(reason or f"Error: invalid receipt {field} ({value})")


class ScoringError(ReceiptError):
    """ Raised when an accepted receipt cannot be scored """


class MalformedAmount(ScoringError):
    """ Raised when a monetary field is not an exact decimal numeral """

    def __init__(self, field: str, value: Any):
        self.field = field
        self.value = value
        super().__init__(f"Error: invalid {field} ({value})")


@dataclass(frozen=True)
class ReceiptItem:
    shortDescription: Optional[str]
    price: Optional[str]


@dataclass(frozen=True)
class Receipt:
    retailer: Optional[str]
    purchaseDate: Optional[str]
    purchaseTime: Optional[str]
    # any other JSON value is kept as given for the scorer to reject
    items: Optional[Tuple[ReceiptItem, ...]]
    total: Optional[str]

    @classmethod
    def from_json(cls, payload: Any) -> "Receipt":
        """
        Builds a receipt from a decoded JSON object. Field contents are not
        judged here: missing fields become None and a non-list ``items`` is kept
        as given, so that validation and scoring report them.
        """
        if not isinstance(payload, dict):
            raise ValidationError("receipt", payload, "Error: request body must be a JSON object")
        items = payload.get("items")
        if isinstance(items, list):
            items = tuple(_item_from_json(item) for item in items)
        return cls(
            retailer=payload.get("retailer"),
            purchaseDate=payload.get("purchaseDate"),
            purchaseTime=payload.get("purchaseTime"),
            items=items,
            total=payload.get("total"),
        )


def _item_from_json(item: Any):
    # anything that is not an object is left for the scorer to reject
    if not isinstance(item, dict):
        return item
    return ReceiptItem(shortDescription=item.get("shortDescription"), price=item.get("price"))


def items_of(receipt: Receipt) -> Tuple[ReceiptItem, ...]:
    """ Returns the receipt items, raising ScoringError if they are unusable """
    if receipt.items is None:
        raise ScoringError("Error: missing items in receipt")
    if not isinstance(receipt.items, tuple):
        raise ScoringError("Error: invalid receipt items list format")
    for item in receipt.items:
        if not isinstance(item, ReceiptItem):
            raise ScoringError("Error: invalid receipt item format")
        if not isinstance(item.shortDescription, str):
            raise ScoringError(f"Error: invalid item description ({item.shortDescription})")
    return receipt.items
