"""
Scan records
One classified item instance with the disposal rule resolved at scan time
"""

import math
import time
from dataclasses import dataclass, replace
from typing import Dict, Optional

from .rules import Rule


def is_number(value) -> bool:
    """Finite int or float; json.loads accepts NaN and Infinity"""
    return (isinstance(value, (int, float)) and not isinstance(value, bool)
            and math.isfinite(value))


@dataclass(frozen=True)
class ScanRecord:
    """
    Individual scanned item.

    The rule is a copy taken from the catalog when the record was created,
    so later catalog changes never rewrite history. Only weight_kg can
    change, and only through with_weight().
    """
    id: str
    category: str
    image_ref: str
    rule: Rule
    timestamp: float
    weight_kg: Optional[float] = None

    def with_weight(self, weight_kg: float) -> "ScanRecord":
        """Return a copy with only the weight replaced"""
        return replace(self, weight_kg=weight_kg)

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        data = {
            "id": self.id,
            "category": self.category,
            "imageRef": self.image_ref,
            "rule": self.rule.to_dict(),
            "timestamp": self.timestamp,
        }
        if self.weight_kg is not None:
            data["weightKg"] = self.weight_kg
        return data

    @classmethod
    def from_dict(cls, data: Dict) -> "ScanRecord":
        """
        Build a record from its serialized form

        Args:
            data: Dictionary produced by to_dict()

        Raises:
            ValueError: if any field has the wrong shape
        """
        if not isinstance(data, dict):
            raise ValueError("Scan record must be an object")
        for key in ("id", "category", "imageRef"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Scan record field '{key}' must be a string")
        if not isinstance(data.get("rule"), dict):
            raise ValueError("Scan record rule must be an object")
        if not is_number(data.get("timestamp")):
            raise ValueError("Scan record timestamp must be a number")

        weight = data.get("weightKg")
        if weight is not None and (not is_number(weight) or not weight > 0):
            raise ValueError("Scan record weightKg must be a positive number")

        return cls(
            id=data["id"],
            category=data["category"],
            image_ref=data["imageRef"],
            rule=Rule.from_dict(data["rule"]),
            timestamp=data["timestamp"],
            weight_kg=weight,
        )


def make_record_id(category: str, timestamp: float) -> str:
    """Category plus creation time in milliseconds"""
    return f"{category}-{int(timestamp * 1000)}"


def create_scan_record(category: str, rule: Rule, image_ref: str,
                       timestamp: Optional[float] = None) -> ScanRecord:
    """
    Create a new history entry from a classification result

    Args:
        category: Classified label, already resolved against the catalog
        rule: Rule the catalog returned for the category
        image_ref: Opaque reference to the source image
        timestamp: Creation time in epoch seconds, defaults to now

    Returns:
        New ScanRecord without a weight
    """
    if timestamp is None:
        timestamp = time.time()

    return ScanRecord(
        id=make_record_id(category, timestamp),
        category=category,
        image_ref=image_ref,
        rule=replace(rule),
        timestamp=timestamp,
    )


def parse_weight_grams(text) -> float:
    """
    Validate a user-entered weight in grams and convert it to kilograms

    Raises:
        ValueError: for non-numeric, non-finite or non-positive input
    """
    try:
        grams = float(str(text).strip())
    except ValueError:
        raise ValueError(f"Invalid weight: {text!r} is not a number") from None

    if not math.isfinite(grams) or grams <= 0:
        raise ValueError(f"Invalid weight: {text!r} must be a positive number")

    return grams / 1000.0
