"""
Register identifiers and their pseudo-code names.

``Register`` enumerates every x86 register the decoder can report, in the
decoder's own numbering, and ``REGISTER_NAMES`` is the parallel read-only
name table indexed by that identifier.

General purpose registers share one base name per physical register across
all widths (``a``, ``c``, ``stack_pointer``, ``r8`` ...) and carry a cast
prefix for the access width. The 32-bit tier spells the first four as
``ax``, ``cx``, ``dx`` and ``bx``; existing consumers depend on that
spelling, so it is kept as is.
"""
from enum import IntEnum
from typing import List, Tuple

from pseudocoder.error_handling import RegisterError


def _extended(cast: str, suffix: str) -> List[Tuple[str, str]]:
    """r8..r15 for one width tier."""
    return [(f"R{n}{suffix}", f"{cast}r{n}") for n in range(8, 16)]


def _numbered(enum_prefix: str, count: int, name_template: str) -> List[Tuple[str, str]]:
    return [(f"{enum_prefix}{n}", name_template.format(n)) for n in range(count)]


_REGISTER_TABLE: List[Tuple[str, str]] = [("NONE", "")]

# General purpose registers  8-bit
_REGISTER_TABLE += [
    ("AL", "(i8)a"), ("CL", "(i8)c"), ("DL", "(i8)d"), ("BL", "(i8)b"),
    ("AH", "(i8)(a >> 8)"), ("CH", "(i8)(c >> 8)"),
    ("DH", "(i8)(d >> 8)"), ("BH", "(i8)(b >> 8)"),
    ("SPL", "(i8)stack_pointer"), ("BPL", "(i8)bp"),
    ("SIL", "(i8)si"), ("DIL", "(i8)di"),
]
_REGISTER_TABLE += _extended("(i8)", "B")

# General purpose registers 16-bit
_REGISTER_TABLE += [
    ("AX", "(i16)a"), ("CX", "(i16)c"), ("DX", "(i16)d"), ("BX", "(i16)b"),
    ("SP", "(i16)stack_pointer"), ("BP", "(i16)bp"),
    ("SI", "(i16)si"), ("DI", "(i16)di"),
]
_REGISTER_TABLE += _extended("(i16)", "W")

# General purpose registers 32-bit
_REGISTER_TABLE += [
    ("EAX", "(i32)ax"), ("ECX", "(i32)cx"), ("EDX", "(i32)dx"), ("EBX", "(i32)bx"),
    ("ESP", "(i32)stack_pointer"), ("EBP", "(i32)bp"),
    ("ESI", "(i32)si"), ("EDI", "(i32)di"),
]
_REGISTER_TABLE += _extended("(i32)", "D")

# General purpose registers 64-bit
_REGISTER_TABLE += [
    ("RAX", "(i64)a"), ("RCX", "(i64)c"), ("RDX", "(i64)d"), ("RBX", "(i64)b"),
    ("RSP", "(i64)stack_pointer"), ("RBP", "(i64)bp"),
    ("RSI", "(i64)si"), ("RDI", "(i64)di"),
]
_REGISTER_TABLE += _extended("(i64)", "")

# Floating point legacy registers
_REGISTER_TABLE += _numbered("ST", 8, "(float)s{}")
_REGISTER_TABLE += [
    ("X87CONTROL", "x87control"),
    ("X87STATUS", "x87status"),
    ("X87TAG", "x87tag"),
]

# Multimedia and vector registers
_REGISTER_TABLE += _numbered("MM", 8, "(float)mm{}")
_REGISTER_TABLE += _numbered("XMM", 32, "(m128)x{}")
_REGISTER_TABLE += _numbered("YMM", 32, "(m256)y{}")
_REGISTER_TABLE += _numbered("ZMM", 32, "(m512)z{}")

# Matrix tile registers
_REGISTER_TABLE += _numbered("TMM", 8, "(matrix_tile)t{}")

# Flags and instruction pointer registers
_REGISTER_TABLE += [
    ("FLAGS", "flags"),
    ("EFLAGS", "eflags"),
    ("RFLAGS", "rflags"),
    ("IP", "instruction_pointer"),
    ("EIP", "instruction_pointer32"),
    ("RIP", "instruction_pointer64"),
]

# Segment registers
_REGISTER_TABLE += [
    ("ES", "extra_segment"),
    ("CS", "code_segment"),
    ("SS", "stack_segment"),
    ("DS", "data_segment"),
    ("FS", "f_segment"),
    ("GS", "g_segment"),
]

# Descriptor table registers
_REGISTER_TABLE += [
    ("GDTR", "table_gdtr"),
    ("LDTR", "table_ldtr"),
    ("IDTR", "table_idtr"),
    ("TR", "table_tr"),
]

# Test, control and debug registers
_REGISTER_TABLE += _numbered("TR", 8, "test_tr{}")
_REGISTER_TABLE += _numbered("CR", 16, "control_cr{}")
_REGISTER_TABLE += _numbered("DR", 16, "debug_dr{}")

# Mask registers
_REGISTER_TABLE += _numbered("K", 8, "mask_k{}")

# Bound registers
_REGISTER_TABLE += _numbered("BND", 4, "bound_bnd{}")
_REGISTER_TABLE += [
    ("BNDCFG", "bound_bndcfg"),
    ("BNDSTATUS", "bound_bndstatus"),
]

# Uncategorized
_REGISTER_TABLE += [
    ("MXCSR", "mxcsr"),
    ("PKRU", "pkru"),
    ("XCR0", "xcr0"),
    ("UIF", "uif"),
]


Register = IntEnum(
    "Register",
    [(enum_name, index) for index, (enum_name, _) in enumerate(_REGISTER_TABLE)],
    module=__name__,
)
Register.__doc__ = "x86 register identifiers in decoder order."

REGISTER_NAMES: Tuple[str, ...] = tuple(name for _, name in _REGISTER_TABLE)

del _REGISTER_TABLE


def resolve_register(reg: int) -> str:
    """
    Return the pseudo-code name of a register.

    Raises:
        RegisterError: If ``reg`` is outside the register table
    """
    if not 0 <= reg < len(REGISTER_NAMES):
        raise RegisterError(reg)
    return REGISTER_NAMES[reg]


def register_from_name(name: str) -> Register:
    """
    Look up a register by its assembler spelling (``"eax"``, ``"r8d"``, ``"xmm3"``).

    Raises:
        KeyError: If the name is not a known register
    """
    return Register[name.upper()]
