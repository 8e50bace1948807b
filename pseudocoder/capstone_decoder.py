"""Capstone bridge: decode x86 bytes into pseudocoder instruction records"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from capstone import Cs, CsError, CS_ARCH_X86, CS_MODE_32, CS_MODE_64, CS_GRP_CALL, CS_GRP_JUMP
from capstone.x86 import X86_OP_IMM, X86_OP_MEM, X86_OP_REG

from pseudocoder.config import UINT64_MASK
from pseudocoder.error_handling import DecoderError, ErrorContext
from pseudocoder.mnemonics import Mnemonic
from pseudocoder.models import DecodedInstruction, DecodedOperand, MemoryKind
from pseudocoder.registers import Register, register_from_name

logger = logging.getLogger(__name__)


class Architecture(Enum):
    """Supported x86 decoding modes"""
    X86 = "x86"
    X86_64 = "x86_64"


# Capstone spells several condition codes differently from the mnemonic table
MNEMONIC_ALIASES = {
    "je": "jz",
    "jne": "jnz",
    "jae": "jnb",
    "jnae": "jb",
    "jc": "jb",
    "jnc": "jnb",
    "ja": "jnbe",
    "jna": "jbe",
    "jge": "jnl",
    "jnge": "jl",
    "jg": "jnle",
    "jng": "jle",
    "jpe": "jp",
    "jpo": "jnp",
    "sal": "shl",
    "movabs": "mov",
    "retn": "ret",
}

# Capstone register names that do not match the Register enum spelling
REGISTER_ALIASES = {
    "fpcw": "X87CONTROL",
    "fpsw": "X87STATUS",
    "fptag": "X87TAG",
    "eiz": "NONE",
    "riz": "NONE",
}

_AGEN_MNEMONICS = {Mnemonic.LEA, Mnemonic.BNDMK}
_MIB_MNEMONICS = {Mnemonic.BNDLDX, Mnemonic.BNDSTX}


@dataclass
class DecodedRecord:
    """One decoded instruction together with its translator inputs"""
    address: int
    size: int
    asm: str
    instruction: DecodedInstruction
    operands: List[DecodedOperand]

    @property
    def end_address(self) -> int:
        return self.address + self.size


def map_mnemonic(text: str) -> Mnemonic:
    """Map a capstone mnemonic spelling to a ``Mnemonic``."""
    text = text.strip().lower()
    # Drop prefixes such as "rep", "lock" or "bnd" that capstone keeps in the mnemonic
    text = text.split()[-1] if text else text
    return Mnemonic.from_text(MNEMONIC_ALIASES.get(text, text))


def map_register(name: Optional[str]) -> Register:
    """Map a capstone register name to a ``Register``, NONE when unknown."""
    if not name:
        return Register.NONE

    name = name.lower()
    if name.startswith("st(") and name.endswith(")"):
        name = "st" + name[3:-1]
    name = REGISTER_ALIASES.get(name, name)

    try:
        return register_from_name(name)
    except KeyError:
        logger.debug("Unknown capstone register name: %s", name)
        return Register.NONE


class CapstoneDecoder:
    """
    Decodes x86 machine code with Capstone and converts every instruction
    into the ``DecodedInstruction``/``DecodedOperand`` model the translator
    consumes.
    """

    def __init__(self, arch: Architecture = Architecture.X86_64):
        """
        Initialize the decoder.

        Args:
            arch: Decoding mode

        Raises:
            DecoderError: If Capstone initialization fails
        """
        self.arch = arch
        try:
            self._cs = Cs(CS_ARCH_X86, self._get_capstone_mode(arch))
            # Enable detail mode for operand information
            self._cs.detail = True
        except CsError as e:
            raise DecoderError(f"Failed to initialize Capstone: {e}", original_exception=e)

    def _get_capstone_mode(self, arch: Architecture) -> int:
        if arch == Architecture.X86:
            return CS_MODE_32
        elif arch == Architecture.X86_64:
            return CS_MODE_64
        raise DecoderError(f"Unsupported architecture: {arch}")

    def decode(self, code: bytes, address: int, count: int = 0) -> List[DecodedRecord]:
        """
        Decode a block of code.

        Args:
            code: Raw bytes to decode
            address: Address of the first byte
            count: Maximum number of instructions to decode (0 = all)

        Returns:
            List of DecodedRecord objects

        Raises:
            DecoderError: If Capstone fails
        """
        if not code:
            return []

        records = []
        try:
            for cs_insn in self._cs.disasm(code, address, count):
                records.append(self._convert(cs_insn))
        except CsError as e:
            raise DecoderError(
                f"Decoding failed: {e}",
                context=ErrorContext(address=address),
                original_exception=e,
            )

        return records

    def decode_one(self, code: bytes, address: int) -> Optional[DecodedRecord]:
        """Decode a single instruction, None if the bytes do not decode."""
        records = self.decode(code, address, count=1)
        return records[0] if records else None

    def _convert(self, cs_insn) -> DecodedRecord:
        mnemonic = map_mnemonic(cs_insn.mnemonic)
        relative = self._is_relative_branch(cs_insn)

        operands = [self._convert_operand(cs_insn, op, mnemonic, relative)
                    for op in cs_insn.operands]

        asm = cs_insn.mnemonic if not cs_insn.op_str else f"{cs_insn.mnemonic} {cs_insn.op_str}"
        instruction = DecodedInstruction(
            mnemonic=mnemonic,
            operand_count=len(operands),
            length=cs_insn.size,
        )
        return DecodedRecord(
            address=cs_insn.address,
            size=cs_insn.size,
            asm=asm,
            instruction=instruction,
            operands=operands,
        )

    def _is_relative_branch(self, cs_insn) -> bool:
        """Direct jumps and calls carry exactly one immediate: their target."""
        if not (cs_insn.group(CS_GRP_JUMP) or cs_insn.group(CS_GRP_CALL)):
            return False
        immediates = [op for op in cs_insn.operands if op.type == X86_OP_IMM]
        return len(immediates) == 1 and len(cs_insn.operands) == 1

    def _convert_operand(self, cs_insn, op, mnemonic: Mnemonic, relative: bool) -> DecodedOperand:
        if op.type == X86_OP_REG:
            return DecodedOperand.reg(map_register(cs_insn.reg_name(op.reg)))

        if op.type == X86_OP_MEM:
            return self._convert_memory(cs_insn, op, mnemonic)

        if op.type == X86_OP_IMM:
            if relative:
                # Capstone reports the absolute target; store it relative to the instruction
                offset = (op.imm - cs_insn.address) & UINT64_MASK
                return DecodedOperand.imm(offset, is_relative=True)
            return DecodedOperand.imm(op.imm, is_signed=op.imm < 0)

        raise DecoderError(
            f"Unsupported capstone operand type {op.type}",
            context=ErrorContext(mnemonic=cs_insn.mnemonic, address=cs_insn.address),
        )

    def _convert_memory(self, cs_insn, op, mnemonic: Mnemonic) -> DecodedOperand:
        mem = op.mem
        if mnemonic in _AGEN_MNEMONICS:
            kind = MemoryKind.AGEN
        elif mnemonic in _MIB_MNEMONICS:
            kind = MemoryKind.MIB
        else:
            kind = MemoryKind.MEM

        return DecodedOperand.mem(
            kind=kind,
            segment=map_register(cs_insn.reg_name(mem.segment)) if mem.segment else Register.NONE,
            base=map_register(cs_insn.reg_name(mem.base)) if mem.base else Register.NONE,
            index=map_register(cs_insn.reg_name(mem.index)) if mem.index else Register.NONE,
            scale=mem.scale,
            displacement=mem.disp if mem.disp != 0 else None,
        )


def decode_hex(text: str) -> bytes:
    """
    Parse a hex byte string such as ``"89 d8"``, ``"89d8"`` or ``"\\x89\\xd8"``.

    Raises:
        ValueError: If the text is not valid hex
    """
    cleaned = text.replace("\\x", "").replace("0x", "").replace(",", " ")
    cleaned = "".join(cleaned.split())
    return bytes.fromhex(cleaned)


def create_decoder(arch: Architecture = Architecture.X86_64) -> CapstoneDecoder:
    """
    Factory function to create a CapstoneDecoder instance.

    Raises:
        DecoderError: If initialization fails
    """
    return CapstoneDecoder(arch)


__all__ = [
    "Architecture",
    "CapstoneDecoder",
    "DecodedRecord",
    "create_decoder",
    "decode_hex",
    "map_mnemonic",
    "map_register",
]
