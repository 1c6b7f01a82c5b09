"""
Device Classifier

Derives site, department and device type labels for a computer from its
position in the Active Directory OU tree.

Each label is chosen by its own ordered rule list:
- Rules are evaluated top to bottom, first match wins
- A rule matches when its pattern appears in the distinguished name
  (case-sensitive substring)
- No match yields "Unknown"

Order is significant. "Desktop Servers" must be tested before both
"Servers" and "Desktop", otherwise a server in a desktop OU would be
labelled as a desktop.
"""

import logging
from typing import Optional, Sequence

from services.models.device_records import UNKNOWN, ClassificationResult

logger = logging.getLogger(__name__)


class ClassificationRule:
    """
    A single pattern → label rule.

    Attributes:
        pattern: Text that must appear in the distinguished name
        label: Label assigned when the pattern matches
    """

    def __init__(self, pattern: str, label: str):
        self.pattern = pattern
        self.label = label

    def matches(self, distinguished_name: str) -> bool:
        return self.pattern in distinguished_name

    def __repr__(self) -> str:
        return f"ClassificationRule({self.pattern!r} -> {self.label!r})"


# Rules in priority order (first match wins)
SITE_RULES = (
    ClassificationRule("DEN", "DEN"),
    ClassificationRule("LAX", "LAX"),
    ClassificationRule("NYC", "NYC"),
    ClassificationRule("PDX", "PDX"),
)

DEPARTMENT_RULES = (
    ClassificationRule("Accounting Computers", "Accounting"),
    ClassificationRule("IT Computers", "IT"),
    ClassificationRule("Marketing Computers", "Marketing"),
    ClassificationRule("Support Computers", "Support"),
    ClassificationRule("Travel Computers", "Travel"),
    ClassificationRule("Servers", "IT"),
)

DEVICE_TYPE_RULES = (
    ClassificationRule("Desktop Servers", "Server"),
    ClassificationRule("Servers", "Server"),
    ClassificationRule("Desktop", "Desktop"),
    ClassificationRule("Laptop", "Laptop"),
)


def first_match(
    distinguished_name: Optional[str], rules: Sequence[ClassificationRule]
) -> str:
    """
    Return the label of the first rule matching the distinguished name.

    Args:
        distinguished_name: The object's DN (may be empty or None)
        rules: Ordered rules to evaluate

    Returns:
        The matching label, or "Unknown"
    """
    if not distinguished_name:
        return UNKNOWN
    for rule in rules:
        if rule.matches(distinguished_name):
            return rule.label
    return UNKNOWN


def classify(distinguished_name: Optional[str]) -> ClassificationResult:
    """
    Classify a computer by its distinguished name.

    Args:
        distinguished_name: e.g. 'CN=WKS-07,OU=DEN,OU=IT Computers,OU=Laptop Computers,DC=corp,DC=example'

    Returns:
        ClassificationResult with site, department and device type
    """
    result = ClassificationResult(
        site=first_match(distinguished_name, SITE_RULES),
        department=first_match(distinguished_name, DEPARTMENT_RULES),
        device_type=first_match(distinguished_name, DEVICE_TYPE_RULES),
    )
    logger.debug(f"Classified '{distinguished_name}' as {result}")
    return result
