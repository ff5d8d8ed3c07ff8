"""
Classification contract
The item label comes from an external image classifier; this module only
describes what it hands back and decides whether the core accepts it
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .rules import Rule, RuleCatalog

logger = logging.getLogger(__name__)


class ClassificationError(Exception):
    """The classifier could not identify the item"""


@dataclass
class ClassificationResult:
    """Successful response from the classifier"""
    category: str
    reuse_ideas: List[str] = field(default_factory=list)


class Classifier(ABC):
    @abstractmethod
    def classify(self, image_ref: str) -> ClassificationResult:
        raise NotImplementedError


class StaticClassifier(Classifier):
    """
    Returns a label chosen by the operator instead of asking a model.
    Used by the command line tool, where the user names the item.
    """

    def __init__(self, label: str, reuse_ideas: Sequence[str] = ()):
        self.label = label
        self.reuse_ideas = list(reuse_ideas)

    def classify(self, image_ref: str) -> ClassificationResult:
        if not self.label or not self.label.strip():
            raise ClassificationError("Could not identify the item.")
        return ClassificationResult(category=self.label.strip(),
                                    reuse_ideas=list(self.reuse_ideas))


def resolve_classification(result: ClassificationResult,
                           catalog: RuleCatalog) -> Optional[Rule]:
    """
    Resolve the classifier's label against the rule catalog

    Returns:
        The matching rule, or None when the label is not in the catalog
    """
    rule = catalog.lookup(result.category)
    if rule is None:
        logger.warning(f"No disposal rule for category '{result.category}'")
    return rule
