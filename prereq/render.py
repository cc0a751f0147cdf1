"""Report renderers for requirements."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Hashable, Iterable, List, Mapping, Set, Type

from jinja2 import Environment, PackageLoader, Template
from slugify import slugify

from prereq.relations import Requirements


def objects(reqs: Requirements[Any]) -> List[Any]:
    """Return every object in reqs, in order of first appearance."""
    seen: Dict[Any, None] = {}
    for dependent, requirement in reqs:
        seen.setdefault(dependent)
        seen.setdefault(requirement)
    return list(seen)


def node_ids(items: Iterable[Hashable]) -> Dict[Hashable, str]:
    """Assign a unique identifier made of [a-z0-9_] to each item.

    Identifiers are slugs of the item's string form. An item whose slug is
    already issued gets the first free numeric suffix, in order of appearance.
    """
    ids: Dict[Hashable, str] = {}
    issued: Set[str] = set()
    for item in items:
        base = slugify(str(item), separator="_") or "node"
        candidate = base
        count = 1
        while candidate in issued:
            count += 1
            candidate = f"{base}_{count}"
        issued.add(candidate)
        ids[item] = candidate
    return ids


def dot_label(value: Any) -> str:
    """Escape a value for use in a double-quoted DOT string."""
    return str(value).replace("\\", "\\\\").replace('"', '\\"')


class Renderer(ABC):

    """Abstract base class for all renderers."""

    name: str
    template_name: str

    def __init__(self, env: Environment):
        self.env = env
        self.template: Template = env.get_template(self.template_name)

    def render(self, reqs: Requirements[Any]) -> str:
        """Render reqs to a string."""
        logging.info("rendering %r as %s", reqs, self.name)
        return self.template.render(**self.context(reqs))

    @abstractmethod
    def context(self, reqs: Requirements[Any]) -> Mapping[str, Any]:
        ...


class Dot(Renderer):

    """Renders a Graphviz digraph with an edge from each dependent."""

    name = "dot"
    template_name = "graph.dot.jinja"

    def context(self, reqs: Requirements[Any]) -> Mapping[str, Any]:
        items = objects(reqs)
        ids = node_ids(items)
        return {
            "nodes": [(ids[item], item) for item in items],
            "edges": [(ids[dep], ids[req]) for dep, req in reqs],
            "reflexive": reqs.reflexive,
        }


class Markdown(Renderer):

    """Renders a Markdown report of objects and requirement chains."""

    name = "markdown"
    template_name = "report.md.jinja"

    def context(self, reqs: Requirements[Any]) -> Mapping[str, Any]:
        return {
            "objects": [
                (item, reqs.requirements(item), reqs.dependents(item))
                for item in objects(reqs)
            ],
            "chains": reqs.all_requirements(),
            "size": reqs.size(),
            "reflexive": reqs.reflexive,
        }


renderers: Dict[str, Type[Renderer]] = {r.name: r for r in [Dot, Markdown]}


def environment() -> Environment:
    """Create the Jinja2 environment for the packaged templates."""
    env = Environment(
        loader=PackageLoader("prereq", "templates"),
        autoescape=False,
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
    )
    env.filters["dot_label"] = dot_label
    return env


def render(name: str, reqs: Requirements[Any]) -> str:
    """Render reqs with the renderer called name."""
    return renderers[name](environment()).render(reqs)
