from typing import Any, Dict, List, Set

from pbxwriter.generators.xcode.model import PBXObject, PBXProject


def collect_objects(project: PBXProject) -> List[PBXObject]:
    objects: List[PBXObject] = []
    project.visit(objects.append)
    return objects


def validate_ownership(project: PBXProject) -> List[str]:
    errors = []
    seen: Set[int] = set()
    for obj in collect_objects(project):
        if id(obj) in seen:
            errors.append(f"{obj.isa.name} {obj.display_name()} is owned more than once")
        seen.add(id(obj))
    return errors


def validate_ids(project: PBXProject) -> List[str]:
    errors = []
    owners: Dict[str, PBXObject] = {}
    for obj in collect_objects(project):
        if not obj.id:
            errors.append(f"{obj.isa.name} {obj.display_name()} has no id")
            continue
        other = owners.setdefault(obj.id, obj)
        if other is not obj:
            errors.append(
                f"duplicate id {obj.id} for {other.isa.name} {other.display_name()} "
                f"and {obj.isa.name} {obj.display_name()}"
            )
    return errors


def validate_references(project: PBXProject) -> List[str]:
    errors = []
    owned: Set[int] = {id(obj) for obj in collect_objects(project)}

    def check_references(value: Any, context: str):
        if isinstance(value, PBXObject):
            if id(value) not in owned:
                errors.append(
                    f"Invalid reference in {context}: {value.isa.name} {value.display_name()}"
                )
        elif isinstance(value, list):
            for index, item in enumerate(value):
                check_references(item, f"{context}[{index}]")
        elif isinstance(value, dict):
            for key, item in value.items():
                check_references(item, f"{context}.{key}")

    for obj in collect_objects(project):
        for key, value in obj.properties().items():
            check_references(value, f"{obj.isa.name}({obj.display_name()}).{key}")

    return errors
