"""pseudocoder - one-line pseudo-code for decoded x86 instructions"""

from .__version__ import __version__
from .error_handling import (
    PseudocoderError,
    InputValidationError,
    OperandError,
    RegisterError,
    CapacityExceededError,
    NoTranslationError,
    DecoderError,
    ConfigurationError,
)
from .mnemonics import Mnemonic
from .registers import Register, REGISTER_NAMES, resolve_register
from .models import (
    OperandKind,
    MemoryKind,
    MemoryOperand,
    ImmediateOperand,
    PointerOperand,
    DecodedOperand,
    DecodedInstruction,
    TranslationOutcome,
    TranslationResult,
)
from .text_sink import BoundedTextSink
from .operands import OperandRenderer, render_operand
from .rules import DEFAULT_RULES, TemplateShape, TranslationRule
from .translator import InstructionTranslator, translate_instruction, translate_to_text

__all__ = [
    '__version__',
    'PseudocoderError',
    'InputValidationError',
    'OperandError',
    'RegisterError',
    'CapacityExceededError',
    'NoTranslationError',
    'DecoderError',
    'ConfigurationError',
    'Mnemonic',
    'Register',
    'REGISTER_NAMES',
    'resolve_register',
    'OperandKind',
    'MemoryKind',
    'MemoryOperand',
    'ImmediateOperand',
    'PointerOperand',
    'DecodedOperand',
    'DecodedInstruction',
    'TranslationOutcome',
    'TranslationResult',
    'BoundedTextSink',
    'OperandRenderer',
    'render_operand',
    'DEFAULT_RULES',
    'TemplateShape',
    'TranslationRule',
    'InstructionTranslator',
    'translate_instruction',
    'translate_to_text',
]
