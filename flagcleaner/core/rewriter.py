#!/usr/bin/env python3
"""rewriter.py - Resolve `#if` blocks guarded by a single flag

BlockRewriter walks a parsed file and, for every conditional block whose
conditions mention exactly the target flag, replaces the block with the body
of the clause that survives once the flag is permanently enabled. Blocks on
other flags are kept verbatim, but their bodies are still walked so nested
blocks on the target flag get resolved.
"""

import logging
from dataclasses import replace
from typing import Optional, Sequence, Tuple

from flagcleaner.core.evaluator import collect_flag_references, evaluate
from flagcleaner.syntax.tokens import Trivia
from flagcleaner.syntax.tree import (
    BraceGroup,
    Clause,
    ClauseKind,
    ConditionalBlock,
    Item,
    Node,
    Placeholder,
    SourceFile,
    first_token,
    has_content,
    with_first_token,
)
from flagcleaner.utils.errors import UnsupportedExpression

logger = logging.getLogger(__name__)


def select_clause(clauses: Sequence[Clause], flag: str) -> Optional[Clause]:
    """First `#if`/`#elseif` clause that holds, else the `#else` clause, else None."""
    fallback = None
    for clause in clauses:
        if clause.kind is ClauseKind.ELSE:
            fallback = clause
        elif evaluate(clause.condition, flag):
            return clause
    return fallback


def drop_directive_line(trivia: Trivia) -> Trivia:
    """Remove one newline from a leading newline run, compensating for the directive line."""
    if not trivia or not trivia[0].is_newline:
        return tuple(trivia)
    head = trivia[0]
    if head.count > 1:
        return (head.with_count(head.count - 1),) + tuple(trivia[1:])
    return tuple(trivia[1:])


class BlockRewriter:
    """
    One rewriting pass over a file.

    Usage:
        rewriter = BlockRewriter("FEATURE_FLAG")
        new_tree = rewriter.rewrite(tree)
        if rewriter.is_edited: ...
    """

    def __init__(self, flag: str):
        self.flag = flag
        self.is_edited = False
        self.resolved_blocks = 0

    def rewrite(self, tree: SourceFile) -> SourceFile:
        return replace(tree, items=self._rewrite_nodes(tree.items))

    def _rewrite_nodes(self, nodes: Sequence[Node]) -> Tuple[Node, ...]:
        rewritten = []
        for node in nodes:
            if isinstance(node, ConditionalBlock):
                rewritten.extend(self._rewrite_block(node))
            elif isinstance(node, Item):
                rewritten.append(self._rewrite_item(node))
            else:
                rewritten.append(node)
        return tuple(rewritten)

    def _rewrite_item(self, item: Item) -> Item:
        if not any(isinstance(part, BraceGroup) for part in item.parts):
            return item
        parts = tuple(
            replace(part, items=self._rewrite_nodes(part.items))
            if isinstance(part, BraceGroup)
            else part
            for part in item.parts
        )
        return replace(item, parts=parts)

    def _guard_passes(self, block: ConditionalBlock) -> bool:
        try:
            flags = collect_flag_references(block.conditions)
        except UnsupportedExpression as e:
            logger.debug(f"Skipping block on line {block.clauses[0].directive.line}: {e}")
            return False
        return flags == frozenset({self.flag})

    def _rewrite_block(self, block: ConditionalBlock) -> Tuple[Node, ...]:
        if not self._guard_passes(block):
            clauses = tuple(
                replace(clause, body=self._rewrite_nodes(clause.body))
                for clause in block.clauses
            )
            return (replace(block, clauses=clauses),)

        self.is_edited = True
        self.resolved_blocks += 1
        winner = select_clause(block.clauses, self.flag)
        line = block.clauses[0].directive.line

        if winner is None:
            logger.debug(f"Removing block on line {line}: no clause holds")
            return (Placeholder.with_trivia(block.leading_trivia),)

        body = self._rewrite_nodes(winner.body)
        if not has_content(body):
            logger.debug(f"Removing block on line {line}: {winner.kind.value} body is empty")
            return (Placeholder.with_trivia(block.leading_trivia),)

        logger.debug(f"Keeping {winner.kind.value} body of block on line {line}")
        leading = tuple(block.leading_trivia)
        # Removed nested blocks at the top of the body leave no line behind
        while isinstance(body[0], Placeholder):
            leading += drop_directive_line(body[0].token.leading)
            body = body[1:]
        head = first_token(body[0])
        leading += drop_directive_line(head.leading)
        return (with_first_token(body[0], head.with_leading(leading)),) + body[1:]
