"""
Xcode project file formatter.

This module converts a PBXProject object graph into the text of a project
file (.pbxproj). Objects are grouped per class in sections (in the order of
PBXObjectClass) and sorted by id within a section so the output only depends
on the graph and not on the order objects were created in.
"""

import re
from typing import Any, Dict, List

from pbxwriter.generators.xcode.model import PBXObject, PBXObjectClass, PBXProject

ObjectsPerClass = Dict[PBXObjectClass, List[PBXObject]]

# Strings made only of those characters do not need to be quoted
_UNQUOTED_STRING = re.compile(r"^[A-Za-z0-9_$./]+$")

_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\t": "\\t",
}


def format_xcode_project(project: PBXProject) -> str:
    """
    Convert a PBXProject to its string representation.

    Args:
        project: The project, with ids assigned to all its objects.

    Returns:
        A string containing the formatted Xcode project file content.
    """
    if not project.id:
        raise ValueError(f"project {project.display_name()} has no id assigned")

    result = "// !$*UTF8*$!\n"
    result += "{\n"
    result += "\tarchiveVersion = 1;\n"
    result += "\tclasses = {\n"
    result += "\t};\n"
    result += "\tobjectVersion = 46;\n"
    result += "\tobjects = {\n"

    for isa, objects in collect_objects_per_class(project).items():
        result += "\n"
        result += f"/* Begin {isa.name} section */\n"
        for obj in sorted(objects, key=lambda o: o.id):
            result += format_object(obj, 2)
        result += f"/* End {isa.name} section */\n"

    result += "\t};\n"
    result += f"\trootObject = {format_reference(project)};\n"
    result += "}\n"
    return result


def collect_objects_per_class(project: PBXProject) -> ObjectsPerClass:
    """
    Group all the objects owned by the project per class.

    The returned dictionary iterates in PBXObjectClass order and only
    contains the classes that have at least one object. Within a class the
    objects are in visitation order.
    """
    collected: ObjectsPerClass = {}

    def collect(obj: PBXObject) -> None:
        collected.setdefault(obj.isa, []).append(obj)

    project.visit(collect)
    return {isa: collected[isa] for isa in PBXObjectClass if isa in collected}


def format_object(obj: PBXObject, indent_level: int) -> str:
    """
    Format one object as an entry of the "objects" dictionary.

    The "isa" key is always printed first, then the properties sorted by key.
    """
    indent = "\t" * indent_level
    props: Dict[str, Any] = {"isa": obj.isa}
    props.update(sorted(obj.properties().items()))

    if obj.single_line:
        body = " ".join(
            f"{key} = {format_value(value, 0, single_line=True)};"
            for key, value in props.items()
        )
        return f"{indent}{format_reference(obj)} = {{{body} }};\n"

    inner_indent = "\t" * (indent_level + 1)
    result = f"{indent}{format_reference(obj)} = {{\n"
    for key, value in props.items():
        result += f"{inner_indent}{key} = {format_value(value, indent_level + 1)};\n"
    result += f"{indent}}};\n"
    return result


def format_reference(obj: PBXObject) -> str:
    if not obj.id:
        raise ValueError(f"{obj.isa.name} {obj.display_name()} has no id assigned")
    return f"{obj.id} /* {obj.comment()} */"


def format_value(value: Any, indent_level: int, single_line: bool = False) -> str:
    """
    Format a property value based on its type.

    Args:
        value: The value to format.
        indent_level: The current indentation level.
        single_line: Whether the value is part of a single line object.

    Returns:
        A string representing the formatted value.
    """
    if isinstance(value, PBXObject):
        return format_reference(value)

    elif isinstance(value, PBXObjectClass):
        return value.name

    elif isinstance(value, bool):
        return "1" if value else "0"

    elif isinstance(value, int):
        return str(value)

    elif isinstance(value, str):
        return format_string(value)

    elif isinstance(value, list):
        return format_list(value, indent_level, single_line)

    elif isinstance(value, dict):
        return format_dict(value, indent_level, single_line)

    else:
        raise TypeError(f"Unsupported type: {type(value).__name__} for value: {value}")


def format_string(value: str) -> str:
    if _UNQUOTED_STRING.match(value):
        return value
    escaped = "".join(_ESCAPES.get(c, c) for c in value)
    return f'"{escaped}"'


def format_dict(value_dict: Dict[str, Any], indent_level: int, single_line: bool = False) -> str:
    if single_line:
        body = "".join(
            f"{format_string(key)} = {format_value(value_dict[key], 0, True)}; "
            for key in sorted(value_dict)
        )
        return f"{{{body}}}"

    indent = "\t" * indent_level
    inner_indent = "\t" * (indent_level + 1)
    result = "{\n"
    for key in sorted(value_dict):
        formatted_value = format_value(value_dict[key], indent_level + 1)
        result += f"{inner_indent}{format_string(key)} = {formatted_value};\n"
    result += f"{indent}}}"
    return result


def format_list(value_list: List[Any], indent_level: int, single_line: bool = False) -> str:
    if single_line:
        body = "".join(f"{format_value(item, 0, True)}, " for item in value_list)
        return f"({body})"

    indent = "\t" * indent_level
    inner_indent = "\t" * (indent_level + 1)
    result = "(\n"
    for item in value_list:
        result += f"{inner_indent}{format_value(item, indent_level + 1)},\n"
    result += f"{indent})"
    return result
