"""Fact extraction from class files.

One pass over a class file produces three kinds of facts, delivered to a
:class:`FactSink`:

- provides: the class itself, each declared field and each declared method
- inherits: the superclass (None for root types) and each interface
- uses: field accesses, invocations, class literals and class-level
  annotation references made by the class's code

Checked and library classes go through the same extractor; what a sink does
with the facts (a library sink ignores uses) is the only difference.
"""

from __future__ import annotations

from typing import Protocol

from linkcheck.classfile.descriptors import (
    class_of_descriptor,
    class_of_internal_name,
    owner_of_descriptor,
)
from linkcheck.classfile.instructions import (
    FIELD_INSNS,
    INVOKESTATIC,
    LDC_INSNS,
    iter_reference_instructions,
)
from linkcheck.classfile.member import Member
from linkcheck.classfile.reader import (
    Annotation,
    Attribute,
    ClassFile,
    ClassFileParser,
    ConstantTag,
    ElementValue,
)
from linkcheck.core.errors import ClassFormatError

ANNOTATION_ATTRIBUTES = ("RuntimeVisibleAnnotations", "RuntimeInvisibleAnnotations")


class FactSink(Protocol):
    """Receiver for facts extracted from class files."""

    def on_provides(self, clazz: str, member: Member) -> None: ...

    def on_inherits(self, clazz: str, super_class: str | None) -> None: ...

    def on_uses(self, from_class: str, to_class: str, member: Member) -> None: ...


class FactExtractor:
    """Parse class files and feed their facts to a sink.

    Usage::

        extractor = FactExtractor(store.checked_sink())
        name = extractor.read_class(data, origin="app.jar!/com/example/Main.class")
    """

    def __init__(self, sink: FactSink) -> None:
        self._sink = sink

    @property
    def sink(self) -> FactSink:
        return self._sink

    def read_class(self, data: bytes, origin: str = "<bytes>") -> str:
        """Extract all facts from one class file and return its internal name.

        Raises:
            ClassFormatError: If the bytes are not a well-formed class file.
        """
        parser = ClassFileParser(data, origin)
        classfile = parser.parse()
        name = classfile.this_class

        self._sink.on_provides(name, Member.self_())
        self._sink.on_inherits(name, classfile.super_class)
        for interface in classfile.interfaces:
            self._sink.on_inherits(name, interface)

        self._visit_class_annotations(parser, classfile)

        for field in classfile.fields:
            self._sink.on_provides(name, Member.field(field.descriptor, field.name))

        for method in classfile.methods:
            self._sink.on_provides(
                name, Member.method(method.is_static, method.descriptor, method.name)
            )
            code_attr = method.attribute("Code")
            if code_attr is not None:
                self._visit_code(parser, classfile, code_attr)

        return name

    def _fail(self, classfile: ClassFile, reason: str) -> ClassFormatError:
        return ClassFormatError.malformed(classfile.origin, reason)

    def _use_type(self, classfile: ClassFile, class_name: str | None) -> None:
        if class_name is not None:
            self._sink.on_uses(classfile.this_class, class_name, Member.self_())

    def _descriptor_class(self, classfile: ClassFile, descriptor: str) -> str | None:
        try:
            return class_of_descriptor(descriptor)
        except ValueError as e:
            raise self._fail(classfile, str(e)) from e

    def _annotation_owner(self, classfile: ClassFile, descriptor: str) -> str:
        try:
            return owner_of_descriptor(descriptor)
        except ValueError as e:
            raise self._fail(classfile, str(e)) from e

    def _visit_code(
        self, parser: ClassFileParser, classfile: ClassFile, code_attr: Attribute
    ) -> None:
        body = parser.parse_code(code_attr)
        pool = classfile.constant_pool
        this_class = classfile.this_class

        for insn in iter_reference_instructions(body.code, classfile.origin, body.code_offset):
            if insn.opcode in FIELD_INSNS:
                owner, name, descriptor = pool.member_ref(insn.cp_index, ConstantTag.FIELDREF)
                self._sink.on_uses(this_class, owner, Member.field(descriptor, name))
            elif insn.opcode in LDC_INSNS:
                tag = pool.tag(insn.cp_index)
                if tag is ConstantTag.CLASS:
                    literal = pool.class_name(insn.cp_index)
                    try:
                        target = class_of_internal_name(literal)
                    except ValueError as e:
                        raise self._fail(classfile, str(e)) from e
                    self._use_type(classfile, target)
            else:
                owner, name, descriptor = pool.member_ref(
                    insn.cp_index, ConstantTag.METHODREF, ConstantTag.INTERFACE_METHODREF
                )
                is_static = insn.opcode == INVOKESTATIC
                self._sink.on_uses(this_class, owner, Member.method(is_static, descriptor, name))

    def _visit_class_annotations(self, parser: ClassFileParser, classfile: ClassFile) -> None:
        for attr in classfile.attributes:
            if attr.name in ANNOTATION_ATTRIBUTES:
                for annotation in parser.parse_annotations(attr):
                    self._visit_annotation(classfile, annotation)

    def _visit_annotation(self, classfile: ClassFile, annotation: Annotation) -> None:
        owner = self._annotation_owner(classfile, annotation.type_descriptor)
        self._use_type(classfile, owner)
        for _name, value in annotation.elements:
            self._visit_element_value(classfile, value)

    def _visit_element_value(self, classfile: ClassFile, value: ElementValue) -> None:
        if value.tag == "c":
            self._use_type(classfile, self._descriptor_class(classfile, value.value))
        elif value.tag == "e":
            descriptor, constant = value.value
            owner = self._annotation_owner(classfile, descriptor)
            self._use_type(classfile, owner)
            self._sink.on_uses(classfile.this_class, owner, Member.field(descriptor, constant))
        elif value.tag == "@":
            self._visit_annotation(classfile, value.value)
        elif value.tag == "[":
            for element in value.value:
                self._visit_element_value(classfile, element)
