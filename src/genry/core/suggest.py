"""Filtering of templates for the interactive picker."""

from __future__ import annotations

from collections.abc import Sequence

from genry.core.types import Template


def _rank(query: str, template: Template) -> int | None:
    name = template.name.lower()
    if name == query:
        return 0
    if name.startswith(query):
        return 1
    if query in name:
        return 2
    if template.description and query in template.description.lower():
        return 3
    return None


def suggest(query: str, templates: Sequence[Template]) -> list[Template]:
    """
    Return the templates relevant to *query*, best matches first.

    Every template whose name or description contains the query
    (case-insensitive) is returned. Exact names come first, then name
    prefixes, then other name matches, then description matches. Templates of
    equal rank keep their original order. A blank query returns everything.
    """
    query = query.strip().lower()
    if not query:
        return list(templates)

    ranked = [
        (rank, i, t)
        for i, t in enumerate(templates)
        if (rank := _rank(query, t)) is not None
    ]
    ranked.sort(key=lambda item: (item[0], item[1]))
    return [t for _, _, t in ranked]
