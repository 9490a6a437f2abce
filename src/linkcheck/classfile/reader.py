"""Binary reader for JVM class files.

Parses the structural parts of a class file that link checking needs: the
constant pool, class/super/interface names, field and method declarations,
raw attributes, ``Code`` bodies and class-level annotations. Debug attributes
and stack maps are kept as opaque bytes and never interpreted.

Every structural problem (truncation, bad magic, unknown constant tags,
out-of-range or mistyped constant pool indices) raises
:class:`~linkcheck.core.errors.ClassFormatError`.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from linkcheck.core.errors import ClassFormatError

CLASS_MAGIC = 0xCAFEBABE

ACC_STATIC = 0x0008

_U2 = struct.Struct(">H")
_U4 = struct.Struct(">I")
_S4 = struct.Struct(">i")


class ConstantTag(IntEnum):
    UTF8 = 1
    INTEGER = 3
    FLOAT = 4
    LONG = 5
    DOUBLE = 6
    CLASS = 7
    STRING = 8
    FIELDREF = 9
    METHODREF = 10
    INTERFACE_METHODREF = 11
    NAME_AND_TYPE = 12
    METHOD_HANDLE = 15
    METHOD_TYPE = 16
    DYNAMIC = 17
    INVOKE_DYNAMIC = 18
    MODULE = 19
    PACKAGE = 20


_NUMERIC_WIDTH = {
    ConstantTag.INTEGER: 4,
    ConstantTag.FLOAT: 4,
    ConstantTag.LONG: 8,
    ConstantTag.DOUBLE: 8,
}

_REF_TAGS = (ConstantTag.FIELDREF, ConstantTag.METHODREF, ConstantTag.INTERFACE_METHODREF)


def decode_modified_utf8(raw: bytes) -> str:
    """Decode the JVM's modified UTF-8.

    NUL is encoded as ``C0 80`` and supplementary characters as two
    three-byte surrogates, neither of which the stdlib codec accepts as is.
    """
    text = raw.replace(b"\xc0\x80", b"\x00").decode("utf-8", "surrogatepass")
    if any("\ud800" <= ch <= "\udfff" for ch in text):
        text = text.encode("utf-16-le", "surrogatepass").decode("utf-16-le", "surrogatepass")
    return text


class ByteReader:
    """Big-endian cursor over a byte buffer with bounds checking."""

    def __init__(self, data: bytes, origin: str, base: int = 0) -> None:
        self._data = data
        self._origin = origin
        self._base = base
        self.pos = 0

    def fail(self, reason: str) -> ClassFormatError:
        return ClassFormatError.malformed(self._origin, reason, self._base + self.pos)

    def _need(self, n: int) -> None:
        if self.pos + n > len(self._data):
            raise self.fail(f"truncated: need {n} byte(s), {len(self._data) - self.pos} left")

    def u1(self) -> int:
        self._need(1)
        value = self._data[self.pos]
        self.pos += 1
        return value

    def u2(self) -> int:
        self._need(2)
        (value,) = _U2.unpack_from(self._data, self.pos)
        self.pos += 2
        return value  # type: ignore[no-any-return]

    def u4(self) -> int:
        self._need(4)
        (value,) = _U4.unpack_from(self._data, self.pos)
        self.pos += 4
        return value  # type: ignore[no-any-return]

    def s4(self) -> int:
        self._need(4)
        (value,) = _S4.unpack_from(self._data, self.pos)
        self.pos += 4
        return value  # type: ignore[no-any-return]

    def read(self, n: int) -> bytes:
        self._need(n)
        chunk = self._data[self.pos : self.pos + n]
        self.pos += n
        return chunk

    @property
    def offset(self) -> int:
        return self._base + self.pos

    @property
    def remaining(self) -> int:
        return len(self._data) - self.pos


class ConstantPool:
    """Parsed constant pool with typed accessors.

    Entries are ``(tag, payload)`` tuples. ``Utf8`` payloads are decoded
    strings; index-bearing entries keep their raw indices; numeric entries
    keep raw bytes. Slot 0 and the slot after each Long/Double are None.
    """

    def __init__(self, entries: list[tuple[ConstantTag, Any] | None], origin: str) -> None:
        self._entries = entries
        self._origin = origin

    def __len__(self) -> int:
        return len(self._entries)

    def _fail(self, reason: str) -> ClassFormatError:
        return ClassFormatError.malformed(self._origin, reason)

    def entry(self, index: int, *tags: ConstantTag) -> tuple[ConstantTag, Any]:
        entry = self._entries[index] if 0 < index < len(self._entries) else None
        if entry is None:
            raise self._fail(f"invalid constant pool index {index}")
        if tags and entry[0] not in tags:
            expected = "/".join(t.name for t in tags)
            raise self._fail(f"constant #{index} is {entry[0].name}, expected {expected}")
        return entry

    def tag(self, index: int) -> ConstantTag:
        return self.entry(index)[0]

    def utf8(self, index: int) -> str:
        return self.entry(index, ConstantTag.UTF8)[1]  # type: ignore[no-any-return]

    def class_name(self, index: int) -> str:
        return self.utf8(self.entry(index, ConstantTag.CLASS)[1])

    def name_and_type(self, index: int) -> tuple[str, str]:
        name_index, descriptor_index = self.entry(index, ConstantTag.NAME_AND_TYPE)[1]
        return self.utf8(name_index), self.utf8(descriptor_index)

    def member_ref(self, index: int, *tags: ConstantTag) -> tuple[str, str, str]:
        """Return ``(owner, name, descriptor)`` of a field/method reference."""
        class_index, nat_index = self.entry(index, *(tags or _REF_TAGS))[1]
        name, descriptor = self.name_and_type(nat_index)
        return self.class_name(class_index), name, descriptor


@dataclass(frozen=True, slots=True)
class Attribute:
    name: str
    data: bytes
    offset: int


@dataclass(frozen=True, slots=True)
class MemberInfo:
    """A field_info or method_info structure."""

    access_flags: int
    name: str
    descriptor: str
    attributes: tuple[Attribute, ...]

    @property
    def is_static(self) -> bool:
        return bool(self.access_flags & ACC_STATIC)

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


@dataclass(frozen=True, slots=True)
class CodeBody:
    code: bytes
    code_offset: int


@dataclass(frozen=True, slots=True)
class ElementValue:
    """One annotation element value.

    ``value`` depends on ``tag``: a constant pool index for constants,
    ``(type_descriptor, const_name)`` for ``e``, a return descriptor for
    ``c``, an :class:`Annotation` for ``@`` and a tuple of element values
    for ``[``.
    """

    tag: str
    value: Any


@dataclass(frozen=True, slots=True)
class Annotation:
    type_descriptor: str
    elements: tuple[tuple[str, ElementValue], ...]


@dataclass(frozen=True, slots=True)
class ClassFile:
    minor_version: int
    major_version: int
    constant_pool: ConstantPool
    access_flags: int
    this_class: str
    super_class: str | None
    interfaces: tuple[str, ...]
    fields: tuple[MemberInfo, ...]
    methods: tuple[MemberInfo, ...]
    attributes: tuple[Attribute, ...]
    origin: str

    def attribute(self, name: str) -> Attribute | None:
        for attr in self.attributes:
            if attr.name == name:
                return attr
        return None


_CONST_ELEMENT_TAGS = frozenset("BCDFIJSZs")


class ClassFileParser:
    """Parse class file bytes into a :class:`ClassFile`.

    Usage::

        classfile = ClassFileParser(data, origin="app.jar!/com/Foo.class").parse()
    """

    def __init__(self, data: bytes, origin: str = "<bytes>") -> None:
        self._data = data
        self._origin = origin
        self._pool: ConstantPool | None = None

    @property
    def pool(self) -> ConstantPool:
        if self._pool is None:
            raise ClassFormatError.malformed(self._origin, "constant pool not parsed yet")
        return self._pool

    def parse(self) -> ClassFile:
        r = ByteReader(self._data, self._origin)
        magic = r.u4()
        if magic != CLASS_MAGIC:
            raise ClassFormatError.malformed(self._origin, f"bad magic 0x{magic:08X}", 0)
        minor = r.u2()
        major = r.u2()
        self._pool = self._parse_constant_pool(r)
        pool = self._pool

        access_flags = r.u2()
        this_class = pool.class_name(r.u2())
        super_index = r.u2()
        super_class = pool.class_name(super_index) if super_index else None
        interfaces = tuple(pool.class_name(r.u2()) for _ in range(r.u2()))
        fields = tuple(self._parse_member(r) for _ in range(r.u2()))
        methods = tuple(self._parse_member(r) for _ in range(r.u2()))
        attributes = self._parse_attributes(r)

        return ClassFile(
            minor_version=minor,
            major_version=major,
            constant_pool=pool,
            access_flags=access_flags,
            this_class=this_class,
            super_class=super_class,
            interfaces=interfaces,
            fields=fields,
            methods=methods,
            attributes=attributes,
            origin=self._origin,
        )

    def _parse_constant_pool(self, r: ByteReader) -> ConstantPool:
        count = r.u2()
        entries: list[tuple[ConstantTag, Any] | None] = [None] * max(count, 1)
        index = 1
        while index < count:
            raw_tag = r.u1()
            try:
                tag = ConstantTag(raw_tag)
            except ValueError:
                raise r.fail(f"unknown constant pool tag {raw_tag} at #{index}") from None

            payload: Any
            if tag is ConstantTag.UTF8:
                raw = r.read(r.u2())
                try:
                    payload = decode_modified_utf8(raw)
                except UnicodeError as e:
                    raise r.fail(f"bad Utf8 constant #{index}: {e}") from e
            elif tag in (ConstantTag.CLASS, ConstantTag.STRING, ConstantTag.METHOD_TYPE,
                         ConstantTag.MODULE, ConstantTag.PACKAGE):
                payload = r.u2()
            elif tag is ConstantTag.METHOD_HANDLE:
                payload = (r.u1(), r.u2())
            elif tag in _NUMERIC_WIDTH:
                payload = r.read(_NUMERIC_WIDTH[tag])
            else:
                payload = (r.u2(), r.u2())

            entries[index] = (tag, payload)
            # Long and Double take two slots
            index += 2 if tag in (ConstantTag.LONG, ConstantTag.DOUBLE) else 1
        if index > count:
            raise r.fail("8-byte constant overruns the constant pool")
        return ConstantPool(entries, self._origin)

    def _parse_attributes(self, r: ByteReader) -> tuple[Attribute, ...]:
        attributes = []
        for _ in range(r.u2()):
            name = self.pool.utf8(r.u2())
            length = r.u4()
            offset = r.offset
            attributes.append(Attribute(name, r.read(length), offset))
        return tuple(attributes)

    def _parse_member(self, r: ByteReader) -> MemberInfo:
        access_flags = r.u2()
        name = self.pool.utf8(r.u2())
        descriptor = self.pool.utf8(r.u2())
        return MemberInfo(access_flags, name, descriptor, self._parse_attributes(r))

    def parse_code(self, attr: Attribute) -> CodeBody:
        """Parse a ``Code`` attribute down to its bytecode array."""
        r = ByteReader(attr.data, self._origin, attr.offset)
        r.u2()  # max_stack
        r.u2()  # max_locals
        code_length = r.u4()
        code_offset = attr.offset + r.pos
        code = r.read(code_length)
        r.read(8 * r.u2())  # exception table
        self._parse_attributes(r)
        return CodeBody(code, code_offset)

    def parse_annotations(self, attr: Attribute) -> tuple[Annotation, ...]:
        """Parse a ``Runtime{Visible,Invisible}Annotations`` attribute."""
        r = ByteReader(attr.data, self._origin, attr.offset)
        annotations = tuple(self._parse_annotation(r) for _ in range(r.u2()))
        return annotations

    def _parse_annotation(self, r: ByteReader) -> Annotation:
        type_descriptor = self.pool.utf8(r.u2())
        elements = []
        for _ in range(r.u2()):
            name = self.pool.utf8(r.u2())
            elements.append((name, self._parse_element_value(r)))
        return Annotation(type_descriptor, tuple(elements))

    def _parse_element_value(self, r: ByteReader) -> ElementValue:
        tag = chr(r.u1())
        value: Any
        if tag in _CONST_ELEMENT_TAGS:
            value = r.u2()
            self.pool.entry(value)
        elif tag == "e":
            value = (self.pool.utf8(r.u2()), self.pool.utf8(r.u2()))
        elif tag == "c":
            value = self.pool.utf8(r.u2())
        elif tag == "@":
            value = self._parse_annotation(r)
        elif tag == "[":
            value = tuple(self._parse_element_value(r) for _ in range(r.u2()))
        else:
            raise r.fail(f"unknown element value tag {tag!r}")
        return ElementValue(tag, value)


def parse_class(data: bytes, origin: str = "<bytes>") -> ClassFile:
    """Parse class file bytes. See :class:`ClassFileParser`."""
    return ClassFileParser(data, origin).parse()
