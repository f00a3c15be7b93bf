"""Prop extraction for exported function components."""

import re
from typing import Optional

from tree_sitter import Node

from routeshift.core.models import ComponentProps, PropAnalysis, PropInfo, PropSummary
from routeshift.parsing.source import SourceUnit, parse_code

_PASCAL_CASE_RE = re.compile(r"^[A-Z]")

_TYPE_REFERENCE_NODES = ("type_identifier", "generic_type", "nested_type_identifier")
_PARAMETER_NODES = ("required_parameter", "optional_parameter")


def _annotation_type(unit: SourceUnit, node: Node) -> Optional[Node]:
    """Return the type node under a node's ``type`` annotation field."""
    annotation = node.child_by_field_name("type")
    if annotation is None:
        return None
    if annotation.type == "type_annotation":
        return annotation.named_children[0] if annotation.named_children else None
    return annotation


def _props_from_members(unit: SourceUnit, body: Node) -> list[PropInfo]:
    props: list[PropInfo] = []
    for member in body.named_children:
        if member.type == "comment":
            continue
        if member.type != "property_signature":
            props.append(PropInfo(name=unit.node_text(member), type="unknown", optional=False))
            continue

        type_node = _annotation_type(unit, member)
        props.append(
            PropInfo(
                name=unit.node_text(member.child_by_field_name("name")),
                type=unit.node_text(type_node) if type_node is not None else "any",
                optional=any(child.type == "?" for child in member.children),
            )
        )
    return props


def _props_from_parameter(
    unit: SourceUnit, param: Node
) -> tuple[Optional[str], list[PropInfo]]:
    if param.type not in _PARAMETER_NODES:
        return None, []

    type_node = _annotation_type(unit, param)
    if type_node is None:
        return None, []

    if type_node.type in _TYPE_REFERENCE_NODES:
        type_name = unit.node_text(type_node)

        interface = unit.interfaces.get(type_name)
        if interface is not None:
            body = interface.child_by_field_name("body")
            return type_name, _props_from_members(unit, body) if body is not None else []

        alias = unit.type_aliases.get(type_name)
        if alias is not None:
            value = alias.child_by_field_name("value")
            if value is not None and value.type == "object_type":
                return type_name, _props_from_members(unit, value)

        return type_name, []

    if type_node.type == "object_type":
        return None, _props_from_members(unit, type_node)

    return None, []


def _component_props(unit: SourceUnit, name: str, params: list[Node]) -> ComponentProps:
    if not params:
        return ComponentProps(component_name=name)

    props_type_name, props = _props_from_parameter(unit, params[0])
    return ComponentProps(component_name=name, props_type_name=props_type_name, props=props)


def _arrow_parameters(arrow: Node) -> list[Node]:
    params = arrow.child_by_field_name("parameters")
    if params is not None:
        return [p for p in params.named_children if p.type != "comment"]
    single = arrow.child_by_field_name("parameter")
    return [single] if single is not None else []


def extract_props(code: str, filename: str) -> PropAnalysis:
    """Extract the props of every exported PascalCase component in a file.

    Function declarations come first, then exported arrow-function
    constants, each in source order.

    Args:
        code: Source text.
        filename: File name used to pick the grammar.

    Returns:
        Prop analysis for the file.
    """
    unit = parse_code(code, filename)
    components: list[ComponentProps] = []

    for fn in unit.functions:
        if not fn.is_exported or not _PASCAL_CASE_RE.match(fn.name):
            continue
        components.append(_component_props(unit, fn.name, fn.parameters))

    for var in unit.variables:
        if not var.is_exported or not _PASCAL_CASE_RE.match(var.name):
            continue
        if var.initializer is None or var.initializer.type != "arrow_function":
            continue
        components.append(_component_props(unit, var.name, _arrow_parameters(var.initializer)))

    summary = PropSummary(
        total_components=len(components),
        total_props=sum(len(c.props) for c in components),
    )
    return PropAnalysis(components=components, summary=summary)
