"""Helpers for JVM internal names and field descriptors.

Internal names are slash separated (``java/lang/String``). Array classes are
named by their descriptor (``[Ljava/lang/String;``, ``[[I``).
"""

from __future__ import annotations

PRIMITIVE_DESCRIPTORS = frozenset("BCDFIJSZ")
VOID_DESCRIPTOR = "V"
OBJECT_CLASS = "java/lang/Object"


def is_array_name(name: str) -> bool:
    return name.startswith("[")


def class_of_descriptor(descriptor: str) -> str | None:
    """Return the class a field descriptor refers to, unwrapping arrays.

    Primitive and void descriptors (and arrays of primitives) return None.

    Raises:
        ValueError: If the descriptor is not a well-formed field descriptor.
    """
    element = descriptor.lstrip("[")
    if element in PRIMITIVE_DESCRIPTORS or (element == VOID_DESCRIPTOR and element == descriptor):
        return None
    if len(element) > 2 and element[0] == "L" and element[-1] == ";" and ";" not in element[1:-1]:
        return element[1:-1]
    raise ValueError(f"not a field descriptor: {descriptor!r}")


def class_of_internal_name(name: str) -> str | None:
    """Return the class a CONSTANT_Class name refers to, unwrapping arrays."""
    if is_array_name(name):
        return class_of_descriptor(name)
    return name


def owner_of_descriptor(descriptor: str) -> str:
    """Return the class named by a plain (non-array) object descriptor.

    Raises:
        ValueError: For primitive, void or array descriptors.
    """
    if descriptor.startswith("["):
        raise ValueError(f"expected an object descriptor, got array {descriptor!r}")
    owner = class_of_descriptor(descriptor)
    if owner is None:
        raise ValueError(f"expected an object descriptor, got {descriptor!r}")
    return owner
