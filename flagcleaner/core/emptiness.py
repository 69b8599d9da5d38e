#!/usr/bin/env python3
"""emptiness.py - Decide whether a rewritten file still declares anything"""

from typing import Optional, Sequence

from flagcleaner.syntax.tree import BraceGroup, ConditionalBlock, Item, Node, SourceFile


def find_meaningful_item(nodes: Sequence[Node]) -> Optional[Item]:
    """
    First meaningful declaration in `nodes`, searching depth first.

    Only the bodies of non-meaningful items and all clauses of conditional
    blocks are searched; the walk stops at the first hit.
    """
    for node in nodes:
        if isinstance(node, Item):
            if node.kind.meaningful:
                return node
            for part in node.parts:
                if isinstance(part, BraceGroup):
                    found = find_meaningful_item(part.items)
                    if found is not None:
                        return found
        elif isinstance(node, ConditionalBlock):
            for clause in node.clauses:
                found = find_meaningful_item(clause.body)
                if found is not None:
                    return found
    return None


def is_empty_file(tree: SourceFile) -> bool:
    """True when only comments, imports and other non-declarations remain."""
    return find_meaningful_item(tree.items) is None
