"""
Disposal rule catalog
Static lookup table mapping an item category to its disposal instructions
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional


class DisposalAction(str, Enum):
    """Where an item ends up"""
    RECYCLE = "Recycle"
    LANDFILL = "Landfill"
    COMPOST = "Compost"
    SPECIAL_DROP_OFF = "Special Drop-off"


@dataclass(frozen=True)
class Rule:
    """Disposal instructions for one category"""
    action: DisposalAction
    preparation: str
    notes: str
    source: str

    def to_dict(self) -> Dict:
        """Convert to dictionary for JSON serialization"""
        return {
            "action": self.action.value,
            "preparation": self.preparation,
            "notes": self.notes,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict) -> "Rule":
        """
        Build a rule from its serialized form

        Raises:
            ValueError: if the action is unknown or a text field is missing
        """
        for key in ("preparation", "notes", "source"):
            if not isinstance(data.get(key), str):
                raise ValueError(f"Rule field '{key}' must be a string")
        return cls(
            action=DisposalAction(data.get("action")),
            preparation=data["preparation"],
            notes=data["notes"],
            source=data["source"],
        )


class RuleCatalog:
    """
    Immutable category -> Rule mapping.
    Lookups for unknown categories return None; no rule is ever made up.
    """

    def __init__(self, rules: Mapping[str, Rule]):
        self._rules = MappingProxyType(dict(rules))

    def lookup(self, category: str) -> Optional[Rule]:
        return self._rules.get(category)

    @property
    def categories(self) -> List[str]:
        return list(self._rules)

    def items(self):
        return self._rules.items()

    def __contains__(self, category) -> bool:
        return category in self._rules

    def __iter__(self) -> Iterator[str]:
        return iter(self._rules)

    def __len__(self) -> int:
        return len(self._rules)


DEFAULT_RULES = RuleCatalog({
    "PET Bottle": Rule(
        action=DisposalAction.RECYCLE,
        preparation="Rinse the bottle and replace the cap. Labels can be left on.",
        notes="Only #1 and #2 plastics are widely accepted in curbside bins.",
        source="https://sfrecycles.org/recycles/plastic-bottles-and-jugs",
    ),
    "Glass Bottle": Rule(
        action=DisposalAction.RECYCLE,
        preparation="Rinse the bottle. Metal caps can be recycled separately. "
                    "Plastic caps go to landfill.",
        notes="Labels can be left on. Do not break the glass.",
        source="https://sfrecycles.org/recycles/glass-bottles-and-jars/",
    ),
    "Paper Cup": Rule(
        action=DisposalAction.COMPOST,
        preparation="Empty any liquids. Plastic lids and straws go to landfill.",
        notes="Most paper cups have a plastic lining, making them non-recyclable. "
              "They can be composted.",
        source="https://sfrecycles.org/recycles/coffee-cups",
    ),
    "Battery": Rule(
        action=DisposalAction.SPECIAL_DROP_OFF,
        preparation="Place clear tape over the terminals of each battery.",
        notes="Put batteries in a clear plastic bag and place it on top of your "
              "black landfill bin on collection day or find a designated "
              "drop-off location.",
        source="https://sfrecycles.org/recycles/batteries",
    ),
    "Apple Core": Rule(
        action=DisposalAction.COMPOST,
        preparation="No preparation needed.",
        notes="All food scraps can be placed in the green compost bin.",
        source="https://sfrecycles.org/recycles/food-scraps",
    ),
})
