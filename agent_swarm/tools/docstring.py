"""
Docstring adapter for tool schemas.

Reads tags out of a tool's docstring and produces the same ``ToolSpec``
that the ``@tool`` decorator attaches::

    def lookup_warranty(product_id, tier="basic"):
        \"\"\"
        @description Look up the warranty terms for a product.
        @param {string} product_id - Catalog identifier of the product
        @param {string} tier - Coverage tier @enum ["basic", "extended"]
        \"\"\"
"""

import inspect
import json
import re
from typing import Callable

from ..exceptions import SchemaDerivationError
from .schema import ParameterSpec, ToolSpec

PARAM_PATTERN = re.compile(r"@param\s+\{(\w+)\}\s+(\w+)\s+-\s+(.*)")
ENUM_PATTERN = re.compile(r"@enum\s+(\[.*?\])")


def _parse_enum(function_name: str, param_name: str, description: str):
    match = ENUM_PATTERN.search(description)
    if not match:
        if "@enum" in description:
            raise SchemaDerivationError(
                function_name, f"invalid enum format for parameter {param_name}."
            )
        return description.strip(), None

    try:
        values = json.loads(match.group(1))
    except json.JSONDecodeError as e:
        raise SchemaDerivationError(
            function_name, f"invalid enum format for parameter {param_name}."
        ) from e

    return description.replace(match.group(0), "").strip(), tuple(values)


def parse_docstring(fn: Callable) -> ToolSpec:
    """
    Build a ToolSpec from ``@description`` / ``@param`` docstring tags.

    Raises:
        SchemaDerivationError: If the docstring is missing or malformed.
    """
    function_name = getattr(fn, "__name__", repr(fn))
    doc = inspect.getdoc(fn)
    if not doc:
        raise SchemaDerivationError(function_name, "missing documentation block.")

    lines = [line.strip() for line in doc.splitlines() if line.strip()]

    description_lines = [line for line in lines if line.startswith("@description")]
    if not description_lines:
        raise SchemaDerivationError(function_name, "missing @description.")
    if len(description_lines) > 1:
        raise SchemaDerivationError(function_name, "more than one @description.")
    description = description_lines[0][len("@description"):].strip()

    parameters = []
    for line in lines:
        if not line.startswith("@param"):
            continue
        match = PARAM_PATTERN.match(line)
        if not match:
            raise SchemaDerivationError(
                function_name, f"invalid @param format: '{line}'."
            )
        param_type, param_name, param_desc = match.groups()
        param_desc, enum = _parse_enum(function_name, param_name, param_desc)
        parameters.append(
            ParameterSpec(
                name=param_name,
                type=param_type.lower(),
                description=param_desc,
                enum=enum,
            )
        )

    return ToolSpec(description=description, parameters=tuple(parameters))
