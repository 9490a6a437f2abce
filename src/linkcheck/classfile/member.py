"""Member identity: the class itself, a field, or a method.

Members compare structurally. Descriptors are compared verbatim, so
``method (I)V run`` and ``method (J)V run`` are different members even though
they share a name.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class MemberKind(str, Enum):
    SELF = "self"
    FIELD = "field"
    METHOD = "method"


@dataclass(frozen=True, slots=True)
class Member:
    """A symbol a class can provide and other classes can use.

    Build instances with :meth:`self_`, :meth:`field` and :meth:`method`
    rather than the constructor.
    """

    kind: MemberKind
    descriptor: str = ""
    name: str = ""
    is_static: bool = False

    @classmethod
    def self_(cls) -> Member:
        return _SELF

    @classmethod
    def field(cls, descriptor: str, name: str) -> Member:
        return cls(MemberKind.FIELD, descriptor, name)

    @classmethod
    def method(cls, is_static: bool, descriptor: str, name: str) -> Member:
        return cls(MemberKind.METHOD, descriptor, name, is_static)

    @property
    def is_self(self) -> bool:
        return self.kind is MemberKind.SELF

    def to_dict(self) -> dict[str, object]:
        if self.is_self:
            return {"kind": self.kind.value}
        data: dict[str, object] = {
            "kind": self.kind.value,
            "descriptor": self.descriptor,
            "name": self.name,
        }
        if self.kind is MemberKind.METHOD:
            data["static"] = self.is_static
        return data

    def __str__(self) -> str:
        if self.is_self:
            return "self"
        return f"{self.kind.value} {self.descriptor} {self.name}"


_SELF = Member(MemberKind.SELF)
