import pytest

from pseudocoder.mnemonics import Mnemonic
from pseudocoder.models import DecodedInstruction, DecodedOperand
from pseudocoder.registers import Register
from pseudocoder.translator import InstructionTranslator


@pytest.fixture
def translator() -> InstructionTranslator:
    return InstructionTranslator()


@pytest.fixture
def mov_eax_ebx():
    instruction = DecodedInstruction(Mnemonic.MOV, operand_count=2)
    operands = [DecodedOperand.reg(Register.EAX), DecodedOperand.reg(Register.EBX)]
    return instruction, operands
