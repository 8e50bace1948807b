"""Translation of a single decoded instruction into a pseudo-code statement"""
import logging
from typing import Mapping, Optional, Sequence

from pseudocoder.config import DEFAULT_BUFFER_CAPACITY, UNKNOWN_INTRINSIC
from pseudocoder.error_handling import (
    CapacityExceededError,
    ErrorContext,
    InputValidationError,
    NoTranslationError,
    OperandError,
)
from pseudocoder.mnemonics import Mnemonic
from pseudocoder.models import (
    DecodedInstruction,
    DecodedOperand,
    TranslationOutcome,
    TranslationResult,
)
from pseudocoder.operands import OperandRenderer
from pseudocoder.rules import DEFAULT_RULES, TemplateShape, TranslationRule
from pseudocoder.text_sink import BoundedTextSink

logger = logging.getLogger(__name__)


class _Emission:
    """Per-call state: the sink, the operand renderer and the operands."""

    def __init__(self, sink: BoundedTextSink, instruction: DecodedInstruction,
                 operands: Sequence[DecodedOperand], virtual_address: int):
        self.sink = sink
        self.instruction = instruction
        self.operands = operands
        self.renderer = OperandRenderer(sink, virtual_address)

    def operand(self, index: int) -> DecodedOperand:
        if index >= len(self.operands):
            raise OperandError(
                f"Operand #{index} is missing",
                context=ErrorContext(mnemonic=self.instruction.mnemonic.value,
                                     operand_index=index),
            )
        return self.operands[index]

    def write(self, text: str) -> None:
        self.sink.append(text)

    def write_operand(self, index: int) -> None:
        self.renderer.render(self.operand(index))

    def write_operand_list(self, first: int) -> None:
        """Comma-join the visible operands starting at ``first``."""
        for index in range(first, self.instruction.visible_operands):
            if index > first:
                self.write(", ")
            self.write_operand(index)


class InstructionTranslator:
    """
    Translates decoded x86 instructions into one-line pseudo-code.

    Dispatch goes through a table of ``TranslationRule`` records keyed by
    mnemonic; each template shape has one emitter. The translator keeps no
    state between calls, so one instance can serve any number of threads.
    """

    def __init__(self, rules: Optional[Mapping[Mnemonic, TranslationRule]] = None):
        """
        Args:
            rules: Mnemonic to rule table, defaults to ``DEFAULT_RULES``
        """
        self.rules = DEFAULT_RULES if rules is None else rules
        self._emitters = {
            TemplateShape.ASSIGNMENT: self._emit_assignment,
            TemplateShape.COMPARISON: self._emit_comparison,
            TemplateShape.CALL: self._emit_call,
            TemplateShape.JUMP: self._emit_jump,
            TemplateShape.CONDITIONAL_BRANCH: self._emit_conditional_branch,
            TemplateShape.VECTOR_MOVE: self._emit_vector_move,
            TemplateShape.VECTOR_OP: self._emit_vector_op,
        }

    def has_translation(self, mnemonic: Mnemonic) -> bool:
        """Check whether ``mnemonic`` has a pseudo-code translation."""
        return mnemonic in self.rules

    def translate_into(self, instruction: Optional[DecodedInstruction],
                       operands: Optional[Sequence[DecodedOperand]],
                       virtual_address: int,
                       buffer: Optional[bytearray],
                       capacity: Optional[int] = None) -> TranslationResult:
        """
        Translate one instruction into a caller-owned buffer.

        The buffer receives a NUL-terminated ASCII string. This method does
        not raise for the three expected failures; they are reported through
        ``TranslationResult.outcome``:

        * ``INVALID_INPUT`` - missing instruction/operands/buffer, zero
          operand count or capacity, or an operand that cannot be rendered;
          the buffer is left untouched
        * ``CAPACITY_EXHAUSTED`` - the statement did not fit; the buffer
          may hold a partial prefix
        * ``NO_TRANSLATION`` - the mnemonic has no rule

        Args:
            instruction: Decoded instruction
            operands: Operands of the instruction, in decoder order
            virtual_address: Address of the instruction
            buffer: Output region
            capacity: Usable bytes of ``buffer``, defaults to its length

        Returns:
            TranslationResult
        """
        has_translation = None
        if instruction is not None:
            has_translation = self.has_translation(instruction.mnemonic)

        try:
            sink = self._validate(instruction, operands, buffer, capacity)
        except InputValidationError as e:
            return TranslationResult(TranslationOutcome.INVALID_INPUT,
                                     has_translation=has_translation, error=e)

        # Emission goes to a staging sink; the caller's buffer only sees it
        # once the operands turned out to be renderable
        try:
            self._translate(sink, instruction, operands, virtual_address)
        except InputValidationError as e:
            return TranslationResult(TranslationOutcome.INVALID_INPUT,
                                     has_translation=True, error=e)
        except NoTranslationError as e:
            logger.debug("No translation for %s at %#x",
                         instruction.mnemonic.value, virtual_address)
            result = TranslationResult(TranslationOutcome.NO_TRANSLATION, sink.getvalue(),
                                       has_translation=False, error=e)
        except CapacityExceededError as e:
            logger.debug("Translation of %s at %#x exceeded %d byte buffer",
                         instruction.mnemonic.value, virtual_address, sink.capacity)
            e.context.mnemonic = instruction.mnemonic.value
            e.context.address = virtual_address
            result = TranslationResult(TranslationOutcome.CAPACITY_EXHAUSTED, sink.getvalue(),
                                       has_translation=True, error=e)
        else:
            result = TranslationResult(TranslationOutcome.SUCCESS, sink.getvalue(),
                                       has_translation=True)

        sink.copy_to(buffer)
        return result

    def translate(self, instruction: DecodedInstruction,
                  operands: Sequence[DecodedOperand],
                  virtual_address: int = 0,
                  capacity: int = DEFAULT_BUFFER_CAPACITY) -> str:
        """
        Translate one instruction and return the pseudo-code text.

        Raises:
            InputValidationError: For malformed arguments or operands
            CapacityExceededError: If the text needs more than ``capacity - 1`` bytes
            NoTranslationError: If the mnemonic has no rule
        """
        result = self.translate_into(instruction, operands, virtual_address,
                                     bytearray(max(capacity, 1)), capacity)
        if result.error is not None:
            raise result.error
        return result.text

    def _validate(self, instruction, operands, buffer, capacity) -> BoundedTextSink:
        if instruction is None:
            raise InputValidationError("Instruction is missing")
        if operands is None or len(operands) == 0:
            raise InputValidationError("Operand list is missing or empty")
        if instruction.operand_count == 0:
            raise InputValidationError(
                "Instruction has no operands",
                context=ErrorContext(mnemonic=instruction.mnemonic.value),
            )
        if buffer is None:
            raise InputValidationError("Output buffer is missing")
        if capacity is None:
            capacity = len(buffer)
        if capacity <= 0 or capacity > len(buffer):
            raise InputValidationError(
                f"Buffer capacity must be between 1 and {len(buffer)}, got {capacity}"
            )
        return BoundedTextSink(bytearray(capacity))

    def _translate(self, sink: BoundedTextSink, instruction: DecodedInstruction,
                   operands: Sequence[DecodedOperand], virtual_address: int) -> None:
        rule = self.rules.get(instruction.mnemonic)
        if rule is None:
            raise NoTranslationError(
                instruction.mnemonic.value,
                context=ErrorContext(mnemonic=instruction.mnemonic.value,
                                     address=virtual_address),
            )

        emission = _Emission(sink, instruction, operands, virtual_address)
        self._emitters[rule.shape](emission, rule)

        if rule.terminated:
            emission.write(";")

    def _emit_assignment(self, emission: _Emission, rule: TranslationRule) -> None:
        emission.write_operand(0)
        emission.write(rule.operator)
        emission.write_operand(1)

    def _emit_comparison(self, emission: _Emission, rule: TranslationRule) -> None:
        emission.write("compare(")
        emission.write_operand(0)
        emission.write(", ")
        emission.write_operand(1)
        emission.write(f") // {rule.comment}")

    def _emit_call(self, emission: _Emission, rule: TranslationRule) -> None:
        emission.write("(")
        emission.write_operand(0)
        emission.write(")()")

    def _emit_jump(self, emission: _Emission, rule: TranslationRule) -> None:
        emission.write("goto ")
        emission.write_operand(0)

    def _emit_conditional_branch(self, emission: _Emission, rule: TranslationRule) -> None:
        emission.write(f"if ({rule.predicate}) goto ")
        emission.write_operand(0)
        if rule.comment is not None:
            emission.write(f"; // {rule.comment}")

    def _emit_vector_move(self, emission: _Emission, rule: TranslationRule) -> None:
        alignment = "aligned" if rule.aligned else "unaligned"
        suffix = rule.intrinsic or ""

        if emission.operand(0).is_memory_like:
            emission.write(f"vector_{alignment}_store{suffix}(")
            emission.write_operand(0)
            emission.write(", ")
            emission.write_operand_list(1)
            emission.write(")")
        elif emission.operand(1).is_memory_like:
            emission.write_operand(0)
            emission.write(f" = vector_{alignment}_load{suffix}(")
            emission.write_operand_list(1)
            emission.write(")")
        else:
            # Register to register moves are plain assignments
            emission.write_operand(0)
            emission.write(" = ")
            emission.write_operand_list(1)

    def _emit_vector_op(self, emission: _Emission, rule: TranslationRule) -> None:
        emission.write_operand(0)
        emission.write(f" = {rule.intrinsic or UNKNOWN_INTRINSIC}(")
        emission.write_operand_list(1)
        emission.write(")")


_default_translator = InstructionTranslator()


def translate_instruction(instruction: Optional[DecodedInstruction],
                          operands: Optional[Sequence[DecodedOperand]],
                          virtual_address: int,
                          buffer: Optional[bytearray],
                          capacity: Optional[int] = None) -> TranslationResult:
    """Translate into ``buffer`` with the default rule table."""
    return _default_translator.translate_into(instruction, operands, virtual_address,
                                              buffer, capacity)


def translate_to_text(instruction: DecodedInstruction,
                      operands: Sequence[DecodedOperand],
                      virtual_address: int = 0,
                      capacity: int = DEFAULT_BUFFER_CAPACITY) -> str:
    """Translate with the default rule table and return the text, raising on failure."""
    return _default_translator.translate(instruction, operands, virtual_address, capacity)


__all__ = [
    "InstructionTranslator",
    "translate_instruction",
    "translate_to_text",
]
