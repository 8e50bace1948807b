"""Core data models for decoded instructions and translation results"""
from dataclasses import dataclass
from enum import Enum
from typing import Optional, TYPE_CHECKING

from pseudocoder.mnemonics import Mnemonic
from pseudocoder.registers import Register

if TYPE_CHECKING:
    from pseudocoder.error_handling import PseudocoderError


class OperandKind(Enum):
    """Tag of a decoded operand"""
    REGISTER = "register"
    MEMORY = "memory"
    IMMEDIATE = "immediate"
    POINTER = "pointer"


class MemoryKind(Enum):
    """Addressing form of a memory operand"""
    MEM = "mem"      # Direct memory access (load/store)
    MIB = "mib"      # Memory-indirect-base, used by bndldx/bndstx
    AGEN = "agen"    # Address generation only, no dereference (lea)


@dataclass(frozen=True)
class MemoryOperand:
    """A memory reference: ``segment: [base + index * scale + displacement]``"""
    kind: MemoryKind = MemoryKind.MEM
    segment: int = Register.NONE
    base: int = Register.NONE
    index: int = Register.NONE
    scale: int = 1
    displacement: Optional[int] = None   # None means no displacement

    @property
    def has_displacement(self) -> bool:
        return self.displacement is not None

    @property
    def has_index(self) -> bool:
        return self.index != Register.NONE


@dataclass(frozen=True)
class ImmediateOperand:
    """A 64-bit immediate; relative immediates are offsets from the instruction address"""
    value: int
    is_signed: bool = False
    is_relative: bool = False


@dataclass(frozen=True)
class PointerOperand:
    """A far pointer ``segment:offset``"""
    segment: int
    offset: int


@dataclass(frozen=True)
class DecodedOperand:
    """Tagged operand variant; exactly one payload matches ``kind``"""
    kind: OperandKind
    register: int = Register.NONE
    memory: Optional[MemoryOperand] = None
    immediate: Optional[ImmediateOperand] = None
    pointer: Optional[PointerOperand] = None

    @classmethod
    def reg(cls, register: int) -> 'DecodedOperand':
        return cls(kind=OperandKind.REGISTER, register=register)

    @classmethod
    def mem(cls, base: int = Register.NONE, displacement: Optional[int] = None,
            index: int = Register.NONE, scale: int = 1,
            segment: int = Register.NONE,
            kind: MemoryKind = MemoryKind.MEM) -> 'DecodedOperand':
        return cls(kind=OperandKind.MEMORY, memory=MemoryOperand(
            kind=kind, segment=segment, base=base, index=index,
            scale=scale, displacement=displacement,
        ))

    @classmethod
    def imm(cls, value: int, is_signed: bool = False,
            is_relative: bool = False) -> 'DecodedOperand':
        return cls(kind=OperandKind.IMMEDIATE, immediate=ImmediateOperand(
            value=value, is_signed=is_signed, is_relative=is_relative,
        ))

    @classmethod
    def ptr(cls, segment: int, offset: int) -> 'DecodedOperand':
        return cls(kind=OperandKind.POINTER,
                   pointer=PointerOperand(segment=segment, offset=offset))

    @property
    def is_memory_like(self) -> bool:
        """True for operands that address memory (memory or far pointer)"""
        return self.kind in (OperandKind.MEMORY, OperandKind.POINTER)


@dataclass(frozen=True)
class DecodedInstruction:
    """
    An instruction as reported by the decoder.

    ``operand_count`` counts every operand including hidden ones (implicit
    flag or status registers); ``visible_operand_count`` counts the explicit
    ones and defaults to ``operand_count``.
    """
    mnemonic: Mnemonic
    operand_count: int
    visible_operand_count: Optional[int] = None
    length: int = 0

    @property
    def visible_operands(self) -> int:
        if self.visible_operand_count is None:
            return self.operand_count
        return self.visible_operand_count


class TranslationOutcome(Enum):
    """Terminal state of one translation call"""
    SUCCESS = "success"
    INVALID_INPUT = "invalid_input"
    CAPACITY_EXHAUSTED = "capacity_exhausted"
    NO_TRANSLATION = "no_translation"


@dataclass
class TranslationResult:
    """
    Result of translating one instruction into a caller buffer.

    ``text`` is whatever the buffer holds up to the cursor. It is only
    meaningful when ``ok``; after a failure it may be a partial prefix.
    ``has_translation`` is None when no instruction was supplied.
    """
    outcome: TranslationOutcome
    text: str = ""
    has_translation: Optional[bool] = None
    error: Optional['PseudocoderError'] = None

    @property
    def ok(self) -> bool:
        return self.outcome is TranslationOutcome.SUCCESS

    def __bool__(self) -> bool:
        return self.ok
