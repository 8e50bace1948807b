import logging

import pytest
from hypothesis import given, strategies as st

from pseudocoder.error_handling import (
    CapacityExceededError,
    InputValidationError,
    NoTranslationError,
    OperandError,
    RegisterError,
)
from pseudocoder.mnemonics import Mnemonic
from pseudocoder.models import DecodedInstruction, DecodedOperand, MemoryKind, TranslationOutcome
from pseudocoder.registers import Register
from pseudocoder.rules import DEFAULT_RULES, TemplateShape, TranslationRule
from pseudocoder.translator import InstructionTranslator, translate_instruction, translate_to_text

CMP_COMMENT = ("set carry_flag, overflow_flag, signed_flag, zero_flag, "
               "aux_carry_flag and parity_flag")


def _insn(mnemonic, *operands, visible=None):
    return DecodedInstruction(mnemonic, operand_count=len(operands),
                              visible_operand_count=visible), list(operands)


def _reg(register):
    return DecodedOperand.reg(register)


def _text(mnemonic, *operands, address=0, visible=None) -> str:
    instruction, ops = _insn(mnemonic, *operands, visible=visible)
    return translate_to_text(instruction, ops, address)


def _sample_operands(rule: TranslationRule):
    """Operands every shape accepts."""
    if rule.shape in (TemplateShape.CALL, TemplateShape.JUMP, TemplateShape.CONDITIONAL_BRANCH):
        return [DecodedOperand.imm(0x10, is_relative=True)]
    if rule.shape in (TemplateShape.VECTOR_MOVE, TemplateShape.VECTOR_OP):
        return [_reg(Register.XMM0), _reg(Register.XMM1)]
    return [_reg(Register.RAX), _reg(Register.RCX)]


def test_mov_32bit(translator, mov_eax_ebx) -> None:
    instruction, operands = mov_eax_ebx
    buffer = bytearray(64)

    result = translator.translate_into(instruction, operands, 0x1000, buffer)

    assert result.outcome is TranslationOutcome.SUCCESS
    assert result.ok
    assert result.has_translation is True
    assert result.text == "(i32)ax = (i32)bx;"
    assert buffer[len(result.text)] == 0


def test_cmp_has_comment_and_no_terminator() -> None:
    text = _text(Mnemonic.CMP, _reg(Register.RAX), _reg(Register.RCX))
    assert text == f"compare((i64)a, (i64)c) // {CMP_COMMENT}"


def test_test_comment() -> None:
    text = _text(Mnemonic.TEST, _reg(Register.EAX), _reg(Register.EAX))
    assert text == "compare((i32)ax, (i32)ax) // set carry_flag, parity_flag, zero_flag"


def test_jmp() -> None:
    text = _text(Mnemonic.JMP, DecodedOperand.imm(0x10, is_relative=True), address=0x400000)
    assert text == "goto 0x400010;"


def test_jz_commented_branch() -> None:
    text = _text(Mnemonic.JZ, DecodedOperand.imm(0x10, is_relative=True), address=0x400000)
    assert text == "if (zero_flag) goto 0x400010; // if zero / equal"


def test_uncommented_branch_takes_terminator() -> None:
    text = _text(Mnemonic.JS, DecodedOperand.imm(0x10, is_relative=True), address=0x400000)
    assert text == "if (sign_flag) goto 0x400010;"


@pytest.mark.parametrize("mnemonic, expected", [
    (Mnemonic.JB, "if (carry_flag) goto 0x400010; // if below"),
    (Mnemonic.JBE, "if (carry_flag || zero_flag) goto 0x400010; // if below or equal"),
    (Mnemonic.JCXZ, "if ((u16)c == 0) goto 0x400010;"),
    (Mnemonic.JECXZ, "if ((u32)c == 0) goto 0x400010;"),
    (Mnemonic.JRCXZ, "if ((u64)c == 0) goto 0x400010;"),
    (Mnemonic.JL, "if (sign_flag != overflow_flag) goto 0x400010; // if less"),
    (Mnemonic.JLE, "if (zero_flag || sign_flag != overflow_flag) goto 0x400010; // if less or equal"),
    (Mnemonic.JNB, "if (!carry_flag) goto 0x400010; // if not below"),
    (Mnemonic.JNBE, "if (!carry_flag && !zero_flag) goto 0x400010; // if not below or equal"),
    (Mnemonic.JNL, "if (sign_flag == overflow_flag) goto 0x400010; // if not less"),
    (Mnemonic.JNLE, "if (!zero_flag && sign_flag == overflow_flag) goto 0x400010; "
                    "// if not less or equal"),
    (Mnemonic.JNO, "if (!overflow_flag) goto 0x400010;"),
    (Mnemonic.JNP, "if (!parity_flag) goto 0x400010;"),
    (Mnemonic.JNS, "if (!sign_flag) goto 0x400010;"),
    (Mnemonic.JNZ, "if (!zero_flag) goto 0x400010; // if not zero / not equal"),
    (Mnemonic.JO, "if (overflow_flag) goto 0x400010;"),
    (Mnemonic.JP, "if (parity_flag) goto 0x400010;"),
    (Mnemonic.JS, "if (sign_flag) goto 0x400010;"),
    (Mnemonic.JZ, "if (zero_flag) goto 0x400010; // if zero / equal"),
])
def test_every_condition_code(mnemonic, expected) -> None:
    text = _text(mnemonic, DecodedOperand.imm(0x10, is_relative=True), address=0x400000)
    assert text == expected


def test_every_conditional_branch_is_listed() -> None:
    branches = {m for m, rule in DEFAULT_RULES.items()
                if rule.shape is TemplateShape.CONDITIONAL_BRANCH}
    assert len(branches) == 19


def test_emms_empties_mmx_state() -> None:
    # The x87 tag word is a hidden operand and still names the destination
    text = _text(Mnemonic.EMMS, _reg(Register.X87TAG), visible=0)
    assert text == "x87tag = _mm_empty();"


def test_call() -> None:
    assert _text(Mnemonic.CALL, _reg(Register.RAX)) == "((i64)a)();"


def test_mov_from_stack_memory() -> None:
    text = _text(Mnemonic.MOV, _reg(Register.RAX),
                 DecodedOperand.mem(base=Register.RSP, displacement=8))
    assert text == "(i64)a = *(: (i64)stack_pointer + 8);"


@pytest.mark.parametrize("mnemonic, operator", [
    (Mnemonic.ADD, " += "),
    (Mnemonic.SUB, " -= "),
    (Mnemonic.AND, " &= "),
    (Mnemonic.OR, " |= "),
])
def test_compound_assignments(mnemonic, operator) -> None:
    assert _text(mnemonic, _reg(Register.RAX), DecodedOperand.imm(1)) == f"(i64)a{operator}1;"


def test_lea() -> None:
    text = _text(Mnemonic.LEA, _reg(Register.RAX),
                 DecodedOperand.mem(base=Register.RBP, displacement=-8, kind=MemoryKind.AGEN))
    assert text == "(i64)a = &(: (i64)bp + -8);"


def test_vector_load() -> None:
    text = _text(Mnemonic.MOVAPS, _reg(Register.XMM0), DecodedOperand.mem(base=Register.RAX))
    assert text == "(m128)x0 = vector_aligned_load_ps(*(: (i64)a));"


def test_vector_store() -> None:
    text = _text(Mnemonic.VMOVDQU, DecodedOperand.mem(base=Register.RDI), _reg(Register.YMM1))
    assert text == "vector_unaligned_store_si(*(: (i64)di), (m256)y1);"


def test_vector_register_move() -> None:
    assert _text(Mnemonic.MOVUPD, _reg(Register.XMM2), _reg(Register.XMM3)) == "(m128)x2 = (m128)x3;"


def test_vector_op_joins_visible_operands() -> None:
    text = _text(Mnemonic.VPADDD, _reg(Register.YMM0), _reg(Register.YMM1), _reg(Register.YMM2))
    assert text == "(m256)y0 = _mm_add_epi32((m256)y1, (m256)y2);"


def test_hidden_operands_are_not_rendered() -> None:
    text = _text(Mnemonic.PADDB, _reg(Register.XMM0), _reg(Register.XMM1),
                 _reg(Register.MXCSR), visible=2)
    assert text == "(m128)x0 = _mm_add_epi8((m128)x1);"


def test_unknown_intrinsic_placeholder() -> None:
    rules = {Mnemonic.PXOR: TranslationRule(TemplateShape.VECTOR_OP)}
    instruction, operands = _insn(Mnemonic.PXOR, _reg(Register.XMM0), _reg(Register.XMM0))
    text = InstructionTranslator(rules).translate(instruction, operands)
    assert text == "(m128)x0 = _mm_??_((m128)x0);"


def test_every_rule_translates() -> None:
    translator = InstructionTranslator()
    for mnemonic, rule in DEFAULT_RULES.items():
        instruction, operands = _insn(mnemonic, *_sample_operands(rule))
        result = translator.translate_into(instruction, operands, 0x400000, bytearray(256))
        assert result.outcome is TranslationOutcome.SUCCESS, mnemonic
        assert result.text


def test_no_translation(translator, caplog) -> None:
    instruction, operands = _insn(Mnemonic.XOR, _reg(Register.EAX), _reg(Register.EAX))

    with caplog.at_level(logging.DEBUG, logger="pseudocoder"):
        result = translator.translate_into(instruction, operands, 0x1000, bytearray(64))

    assert result.outcome is TranslationOutcome.NO_TRANSLATION
    assert result.has_translation is False
    assert isinstance(result.error, NoTranslationError)
    assert not translator.has_translation(Mnemonic.XOR)
    assert "No translation for xor" in caplog.text


def test_translate_raises_no_translation() -> None:
    instruction, operands = _insn(Mnemonic.RET, DecodedOperand.imm(8))
    with pytest.raises(NoTranslationError):
        translate_to_text(instruction, operands)


@pytest.mark.parametrize("instruction, operands, buffer, capacity", [
    (None, [_reg(Register.RAX)], bytearray(8), None),
    (DecodedInstruction(Mnemonic.MOV, 2), None, bytearray(8), None),
    (DecodedInstruction(Mnemonic.MOV, 2), [], bytearray(8), None),
    (DecodedInstruction(Mnemonic.MOV, 0), [_reg(Register.RAX)], bytearray(8), None),
    (DecodedInstruction(Mnemonic.MOV, 2), [_reg(Register.RAX)], None, None),
    (DecodedInstruction(Mnemonic.MOV, 2), [_reg(Register.RAX)], bytearray(8), 0),
])
def test_invalid_input(instruction, operands, buffer, capacity) -> None:
    result = translate_instruction(instruction, operands, 0, buffer, capacity)
    assert result.outcome is TranslationOutcome.INVALID_INPUT
    assert isinstance(result.error, InputValidationError)


def test_has_translation_unknown_without_instruction() -> None:
    result = translate_instruction(None, [_reg(Register.RAX)], 0, bytearray(8))
    assert result.has_translation is None


def test_missing_operand_leaves_buffer_untouched() -> None:
    instruction = DecodedInstruction(Mnemonic.MOV, operand_count=2)
    buffer = bytearray(b"\xff" * 64)

    result = translate_instruction(instruction, [_reg(Register.RAX)], 0, buffer)

    assert result.outcome is TranslationOutcome.INVALID_INPUT
    assert isinstance(result.error, OperandError)
    assert result.text == ""
    assert buffer == bytearray(b"\xff" * 64)


def test_pointer_operand_leaves_buffer_untouched() -> None:
    instruction, operands = _insn(Mnemonic.JMP, DecodedOperand.ptr(0x10, 0x1000))
    buffer = bytearray(b"\xff" * 64)

    result = translate_instruction(instruction, operands, 0, buffer)

    assert result.outcome is TranslationOutcome.INVALID_INPUT
    assert result.has_translation is True
    assert result.text == ""
    assert buffer == bytearray(b"\xff" * 64)


def test_out_of_range_register_leaves_buffer_untouched() -> None:
    instruction, operands = _insn(Mnemonic.MOV, _reg(Register.EAX), _reg(10_000))
    buffer = bytearray(b"\xff" * 64)

    result = translate_instruction(instruction, operands, 0, buffer)

    assert result.outcome is TranslationOutcome.INVALID_INPUT
    assert isinstance(result.error, RegisterError)
    assert result.text == ""
    assert buffer == bytearray(b"\xff" * 64)


def test_capacity_failure_still_writes_prefix(mov_eax_ebx) -> None:
    instruction, operands = mov_eax_ebx
    buffer = bytearray(b"\xff" * 8)

    result = translate_instruction(instruction, operands, 0, buffer)

    assert result.outcome is TranslationOutcome.CAPACITY_EXHAUSTED
    assert result.text == "(i32)ax"
    assert buffer[:8] == bytearray(b"(i32)ax\x00")


def test_one_byte_short_is_capacity_exhausted(mov_eax_ebx) -> None:
    instruction, operands = mov_eax_ebx
    expected = "(i32)ax = (i32)bx;"

    exact = translate_instruction(instruction, operands, 0, bytearray(len(expected) + 1))
    short = translate_instruction(instruction, operands, 0, bytearray(len(expected)))

    assert exact.ok and exact.text == expected
    assert short.outcome is TranslationOutcome.CAPACITY_EXHAUSTED
    assert short.has_translation is True
    assert isinstance(short.error, CapacityExceededError)
    assert short.error.context.mnemonic == "mov"
    assert expected.startswith(short.text)


def test_translate_raises_capacity_error(mov_eax_ebx) -> None:
    instruction, operands = mov_eax_ebx
    with pytest.raises(CapacityExceededError):
        translate_to_text(instruction, operands, capacity=4)


@given(st.sampled_from(sorted(DEFAULT_RULES, key=lambda m: m.value)),
       st.integers(min_value=0, max_value=0xFFFFFFFFFFFFFFFF))
def test_capacity_threshold(mnemonic, address) -> None:
    instruction, operands = _insn(mnemonic, *_sample_operands(DEFAULT_RULES[mnemonic]))
    translator = InstructionTranslator()

    text = translator.translate(instruction, operands, address, capacity=256)
    fits = translator.translate_into(instruction, operands, address, bytearray(len(text) + 1))
    short = translator.translate_into(instruction, operands, address, bytearray(len(text)))

    assert fits.ok and fits.text == text
    assert short.outcome is TranslationOutcome.CAPACITY_EXHAUSTED


def test_translations_are_ascii() -> None:
    translator = InstructionTranslator()
    for mnemonic, rule in DEFAULT_RULES.items():
        instruction, operands = _insn(mnemonic, *_sample_operands(rule))
        assert translator.translate(instruction, operands, 0x400000).isascii()
