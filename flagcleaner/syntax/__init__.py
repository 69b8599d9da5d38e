"""flagcleaner syntax - Lossless Swift lexer, parser and tree."""

from .conditions import ConditionExpr, parse_condition
from .lexer import tokenize
from .parser import parse_source
from .tree import ConditionalBlock, Item, ItemKind, SourceFile

__all__ = [
    "ConditionExpr",
    "parse_condition",
    "tokenize",
    "parse_source",
    "ConditionalBlock",
    "Item",
    "ItemKind",
    "SourceFile",
]
