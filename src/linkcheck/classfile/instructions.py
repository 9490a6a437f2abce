"""JVM instruction stream walking.

Only a handful of opcodes carry references that matter for link checking,
but every instruction has to be stepped over correctly to find them. The
length table below covers the full instruction set, including the
variable-length ``tableswitch``/``lookupswitch`` (4-byte aligned relative to
the start of the code array) and the ``wide`` prefix.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from linkcheck.classfile.reader import ByteReader

LDC = 0x12
LDC_W = 0x13
ILOAD = 0x15
ALOAD = 0x19
ISTORE = 0x36
ASTORE = 0x3A
IINC = 0x84
RET = 0xA9
TABLESWITCH = 0xAA
LOOKUPSWITCH = 0xAB
GETSTATIC = 0xB2
PUTSTATIC = 0xB3
GETFIELD = 0xB4
PUTFIELD = 0xB5
INVOKEVIRTUAL = 0xB6
INVOKESPECIAL = 0xB7
INVOKESTATIC = 0xB8
INVOKEINTERFACE = 0xB9
INVOKEDYNAMIC = 0xBA
WIDE = 0xC4

FIELD_INSNS = frozenset({GETSTATIC, PUTSTATIC, GETFIELD, PUTFIELD})
INVOKE_INSNS = frozenset({INVOKEVIRTUAL, INVOKESPECIAL, INVOKESTATIC, INVOKEINTERFACE})
LDC_INSNS = frozenset({LDC, LDC_W})


def _build_lengths() -> tuple[int, ...]:
    # 0 marks opcodes that are variable length or not valid in class files
    lengths = [0] * 256
    spans = [
        (0x00, 0x0F, 1),  # nop .. dconst_1
        (0x10, 0x10, 2),  # bipush
        (0x11, 0x11, 3),  # sipush
        (0x12, 0x12, 2),  # ldc
        (0x13, 0x14, 3),  # ldc_w, ldc2_w
        (0x15, 0x19, 2),  # iload .. aload
        (0x1A, 0x35, 1),  # iload_0 .. saload
        (0x36, 0x3A, 2),  # istore .. astore
        (0x3B, 0x83, 1),  # istore_0 .. lxor
        (0x84, 0x84, 3),  # iinc
        (0x85, 0x98, 1),  # i2l .. dcmpg
        (0x99, 0xA8, 3),  # ifeq .. jsr
        (0xA9, 0xA9, 2),  # ret
        (0xAC, 0xB1, 1),  # ireturn .. return
        (0xB2, 0xB8, 3),  # getstatic .. invokestatic
        (0xB9, 0xBA, 5),  # invokeinterface, invokedynamic
        (0xBB, 0xBB, 3),  # new
        (0xBC, 0xBC, 2),  # newarray
        (0xBD, 0xBD, 3),  # anewarray
        (0xBE, 0xBF, 1),  # arraylength, athrow
        (0xC0, 0xC1, 3),  # checkcast, instanceof
        (0xC2, 0xC3, 1),  # monitorenter, monitorexit
        (0xC5, 0xC5, 4),  # multianewarray
        (0xC6, 0xC7, 3),  # ifnull, ifnonnull
        (0xC8, 0xC9, 5),  # goto_w, jsr_w
    ]
    for first, last, length in spans:
        for opcode in range(first, last + 1):
            lengths[opcode] = length
    return tuple(lengths)


INSTRUCTION_LENGTHS = _build_lengths()


@dataclass(frozen=True, slots=True)
class Instruction:
    """A reference-bearing instruction and its constant pool operand."""

    offset: int
    opcode: int
    cp_index: int


def iter_reference_instructions(code: bytes, origin: str, base: int = 0) -> Iterator[Instruction]:
    """Yield field access, invocation and ldc instructions in code order.

    Raises:
        ClassFormatError: On unknown opcodes, malformed switches or
            instructions that run past the end of the code array.
    """
    r = ByteReader(code, origin, base)
    while r.remaining:
        offset = r.pos
        opcode = r.u1()

        if opcode in FIELD_INSNS or opcode in INVOKE_INSNS or opcode == LDC_W:
            yield Instruction(offset, opcode, r.u2())
            if opcode == INVOKEINTERFACE:
                r.read(2)  # count, 0
        elif opcode == LDC:
            yield Instruction(offset, opcode, r.u1())
        elif opcode == TABLESWITCH:
            r.read(-(offset + 1) % 4)
            r.s4()  # default
            low = r.s4()
            high = r.s4()
            if high < low:
                raise r.fail(f"tableswitch at {offset} has high {high} < low {low}")
            r.read(4 * (high - low + 1))
        elif opcode == LOOKUPSWITCH:
            r.read(-(offset + 1) % 4)
            r.s4()  # default
            npairs = r.s4()
            if npairs < 0:
                raise r.fail(f"lookupswitch at {offset} has negative npairs {npairs}")
            r.read(8 * npairs)
        elif opcode == WIDE:
            widened = r.u1()
            if widened == IINC:
                r.read(4)
            elif ILOAD <= widened <= ALOAD or ISTORE <= widened <= ASTORE or widened == RET:
                r.read(2)
            else:
                raise r.fail(f"wide applied to opcode 0x{widened:02X}")
        else:
            length = INSTRUCTION_LENGTHS[opcode]
            if length == 0:
                raise r.fail(f"unknown opcode 0x{opcode:02X} at {offset}")
            r.read(length - 1)
