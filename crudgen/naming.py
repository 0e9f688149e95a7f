# File: crudgen/naming.py
"""
CrudGen - Placeholder Resolver
===============================

Derives the full naming vocabulary for one entity and exposes it as the
placeholder map every stub is rendered with.

    >>> vocab = resolve_naming(entity_name_for_table("blog_posts"), GenerationConfig())
    >>> vocab.model_name, vocab.model_view, vocab.model_route
    ('BlogPost', 'blog-post', 'blog-posts')
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from crudgen.models import GenerationConfig, NamingVocabulary
from crudgen.utils import (
    to_camel_case,
    to_kebab_case,
    to_pascal_case,
    to_plural,
    to_singular,
    to_snake_case,
    to_title_human,
)

logger: logging.Logger = logging.getLogger("crudgen.naming")

# Type alias: placeholder token → substitution value.
PlaceholderMap = Dict[str, str]


def entity_name_for_table(table: str) -> str:
    """``blog_posts`` → ``BlogPost``."""
    return to_pascal_case(to_singular(table))


def resolve_route(model_name: str, route: Optional[str] = None) -> str:
    """Explicit override wins; otherwise the kebab-case plural of the class name."""
    if route:
        return route
    return to_kebab_case(to_plural(model_name))


def resolve_naming(
    entity: str,
    config: GenerationConfig,
    route: Optional[str] = None,
    table: Optional[str] = None,
) -> NamingVocabulary:
    """
    Compute every naming variant for *entity*.

    Args:
        entity: Entity name, normally already singular (``BlogPost``).
        config: Supplies the namespaces and the layout identifier.
        route: Optional explicit route slug.
        table: Source table; defaults to the snake_case plural of *entity*.
    """
    model_name: str = to_pascal_case(entity)
    plural: str = to_plural(model_name)

    vocab: NamingVocabulary = NamingVocabulary(
        table=table or to_snake_case(plural),
        model_name=model_name,
        model_title=to_title_human(model_name),
        model_title_plural=to_title_human(plural),
        model_name_camel=to_camel_case(model_name),
        model_name_camel_plural=to_camel_case(plural),
        model_name_plural_upper=to_pascal_case(plural),
        model_name_snake=to_snake_case(model_name),
        model_view=to_kebab_case(model_name),
        model_route=resolve_route(model_name, route),
        model_namespace=config.model_namespace,
        controller_namespace=config.controller_namespace,
        request_namespace=config.request_namespace,
        layout=config.layout or "",
    )
    logger.info(
        "Resolved naming: class=%s view=%s route=%s",
        vocab.model_name,
        vocab.model_view,
        vocab.model_route,
    )
    return vocab


def build_replacements(vocab: NamingVocabulary) -> PlaceholderMap:
    """The placeholder map shared by every stub."""
    return {
        "{{layout}}": vocab.layout,
        "{{modelName}}": vocab.model_name,
        "{{modelTitle}}": vocab.model_title,
        "{{modelTitlePlural}}": vocab.model_title_plural,
        "{{modelNamespace}}": vocab.model_namespace,
        "{{controllerNamespace}}": vocab.controller_namespace,
        "{{requestNamespace}}": vocab.request_namespace,
        "{{modelNamePluralLowerCase}}": vocab.model_name_camel_plural,
        "{{modelNamePluralUpperCase}}": vocab.model_name_plural_upper,
        "{{modelNameLowerCase}}": vocab.model_name_camel,
        "{{modelNameSnake}}": vocab.model_name_snake,
        "{{modelRoute}}": vocab.model_route,
        "{{modelView}}": vocab.model_view,
        "{{tableName}}": vocab.table,
    }


def merge_replacements(*maps: PlaceholderMap) -> PlaceholderMap:
    """Merge placeholder maps left to right; later keys override earlier ones."""
    merged: PlaceholderMap = {}
    for mapping in maps:
        merged.update(mapping)
    return merged


def route_line(vocab: NamingVocabulary) -> str:
    """The resource route the operator has to register by hand."""
    return f"Route::resource('{vocab.model_route}', {vocab.controller_name}::class);"


__all__: List[str] = [
    "PlaceholderMap",
    "entity_name_for_table",
    "resolve_route",
    "resolve_naming",
    "build_replacements",
    "merge_replacements",
    "route_line",
]
