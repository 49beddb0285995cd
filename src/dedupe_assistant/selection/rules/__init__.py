"""Selection rule implementations."""

from .base import RuleIdAllocator, SelectionRule
from .directory_rule import DirectoryRule
from .group_rule import GroupRule
from .text_rule import TextRule

RULE_CLASSES: dict[str, type[SelectionRule]] = {
    rule_class.rule_type: rule_class for rule_class in (GroupRule, TextRule, DirectoryRule)
}

__all__ = [
    "DirectoryRule",
    "GroupRule",
    "RULE_CLASSES",
    "RuleIdAllocator",
    "SelectionRule",
    "TextRule",
]
