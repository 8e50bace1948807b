#!/usr/bin/env python3
"""
pseudocoder - x86 instruction to pseudo-code translator

A command-line tool that decodes x86 / x86-64 machine code and prints a
one-line pseudo-code statement for every instruction.
"""

import argparse
import sys
from typing import List, Optional, TextIO

from pseudocoder.capstone_decoder import Architecture, CapstoneDecoder, DecodedRecord, decode_hex
from pseudocoder.config import (
    DEFAULT_ARCH,
    DEFAULT_BASE_ADDRESS,
    DEFAULT_BUFFER_CAPACITY,
    FALLBACK_COMMENT,
    MAX_BUFFER_CAPACITY,
)
from pseudocoder.error_handling import (
    ConfigurationError,
    ErrorCategory,
    ErrorContext,
    PseudocoderError,
    create_error,
    get_error_handler,
)
from pseudocoder.models import TranslationOutcome
from pseudocoder.translator import InstructionTranslator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='pseudocoder',
        description='🔍 pseudocoder - translate x86 machine code into one-line pseudo-code',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
📖 QUICK START:

  Translate instruction bytes:
    pseudocoder "89 d8"                     # (i32)ax = (i32)bx;
    pseudocoder 4839c8 --address 0x401000

  Pipe from other tools:
    echo "74 0e" | pseudocoder --arch x86

Instructions without a translation are printed as a comment holding the
disassembly text.
        """
    )

    parser.add_argument('hex', nargs='?',
                        help='Instruction bytes as hex (read from stdin when omitted)')

    arch = parser.add_argument_group('🏗️  Architecture Options')
    arch.add_argument('--address', type=lambda text: int(text, 0), default=DEFAULT_BASE_ADDRESS,
                      help=f'Address of the first byte (default: {DEFAULT_BASE_ADDRESS:#x})')
    arch.add_argument('--arch', choices=[a.value for a in Architecture], default=DEFAULT_ARCH,
                      help=f'Decoding mode (default: {DEFAULT_ARCH})')

    output = parser.add_argument_group('💾 Output Options')
    output.add_argument('--capacity', type=int, default=DEFAULT_BUFFER_CAPACITY,
                        help=f'Initial output buffer size in bytes (default: {DEFAULT_BUFFER_CAPACITY})')
    output.add_argument('--debug', action='store_true',
                        help='Enable debug logging and tracebacks')
    return parser


def translate_record(translator: InstructionTranslator, record: DecodedRecord,
                     capacity: int) -> str:
    """
    Translate one decoded record, falling back to the disassembly text.

    A buffer that is too small is doubled until the translation fits or
    MAX_BUFFER_CAPACITY is reached.

    Raises:
        PseudocoderError: If the translation does not fit into MAX_BUFFER_CAPACITY
    """
    fallback = f"{FALLBACK_COMMENT}{record.asm}"
    if not translator.has_translation(record.instruction.mnemonic):
        return fallback

    while True:
        buffer = bytearray(capacity)
        result = translator.translate_into(record.instruction, record.operands,
                                           record.address, buffer)
        if result.ok:
            return result.text

        if result.outcome is TranslationOutcome.CAPACITY_EXHAUSTED:
            if capacity >= MAX_BUFFER_CAPACITY:
                raise create_error(
                    "capacity_exhausted",
                    category=ErrorCategory.CAPACITY_ERROR,
                    context=ErrorContext(address=record.address,
                                         mnemonic=record.instruction.mnemonic.value),
                    address=record.address,
                    capacity=capacity,
                )
            capacity = min(capacity * 2, MAX_BUFFER_CAPACITY)
            continue

        # Operands the engine cannot render and untranslated mnemonics
        return fallback


def format_line(record: DecodedRecord, text: str) -> str:
    return f"{record.address:#010x}  {record.asm:<32}  {text}"


def run(args: argparse.Namespace, stdin: TextIO, stdout: TextIO) -> int:
    handler = get_error_handler(debug_mode=args.debug)

    try:
        if args.capacity <= 0 or args.capacity > MAX_BUFFER_CAPACITY:
            error = create_error("invalid_capacity", category=ErrorCategory.CONFIGURATION_ERROR,
                                 capacity=args.capacity, maximum=MAX_BUFFER_CAPACITY)
            raise ConfigurationError(error.message, suggestion=error.suggestion)

        text = args.hex if args.hex is not None else stdin.read()
        try:
            code = decode_hex(text)
        except ValueError as e:
            error = create_error("invalid_hex", category=ErrorCategory.INPUT_ERROR,
                                 text=text.strip())
            error.original_exception = e
            raise error

        decoder = CapstoneDecoder(Architecture(args.arch))
        records = decoder.decode(code, args.address)
        if not records:
            raise create_error("decode_failed", category=ErrorCategory.DECODER_ERROR,
                               address=args.address)

        translator = InstructionTranslator()
        for record in records:
            stdout.write(format_line(record, translate_record(translator, record, args.capacity)) + "\n")

        decoded_size = sum(record.size for record in records)
        if decoded_size < len(code):
            handler.handle_error(create_error(
                "decode_failed",
                category=ErrorCategory.DECODER_ERROR,
                address=args.address + decoded_size,
            ))
            return 1

    except PseudocoderError as e:
        handler.handle_error(e)
        return 1

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the pseudocoder CLI"""
    parser = build_parser()
    args = parser.parse_args(argv)
    return run(args, sys.stdin, sys.stdout)


if __name__ == '__main__':
    sys.exit(main())
