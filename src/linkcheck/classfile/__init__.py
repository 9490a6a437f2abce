"""Class file parsing and fact extraction."""

from linkcheck.classfile.extractor import FactExtractor, FactSink
from linkcheck.classfile.member import Member, MemberKind
from linkcheck.classfile.reader import ClassFile, ClassFileParser, parse_class

__all__ = [
    "ClassFile",
    "ClassFileParser",
    "FactExtractor",
    "FactSink",
    "Member",
    "MemberKind",
    "parse_class",
]
