"""Rendering of decoded operands into pseudo-code expressions"""
from pseudocoder.config import DEFAULT_BUFFER_CAPACITY
from pseudocoder.error_handling import OperandError
from pseudocoder.models import DecodedOperand, MemoryKind, MemoryOperand, OperandKind
from pseudocoder.numeric import to_unsigned64, write_hex, write_signed, write_unsigned
from pseudocoder.registers import resolve_register
from pseudocoder.text_sink import BoundedTextSink


class OperandRenderer:
    """
    Writes operands to a sink.

    The virtual address is the instruction's own address; relative
    immediates (branch and call targets) are resolved against it.
    """

    def __init__(self, sink: BoundedTextSink, virtual_address: int = 0):
        self.sink = sink
        self.virtual_address = virtual_address

    def render(self, operand: DecodedOperand) -> None:
        """
        Emit the textual form of ``operand``.

        Raises:
            OperandError: For pointer operands and malformed variants
            RegisterError: For register identifiers outside the name table
            CapacityExceededError: When the sink runs out of room
        """
        if operand.kind is OperandKind.REGISTER:
            self.render_register(operand.register)
        elif operand.kind is OperandKind.MEMORY:
            if operand.memory is None:
                raise OperandError("Memory operand without memory payload")
            self._render_memory(operand.memory)
        elif operand.kind is OperandKind.IMMEDIATE:
            if operand.immediate is None:
                raise OperandError("Immediate operand without immediate payload")
            self._render_immediate(operand)
        else:
            raise OperandError(f"Cannot render {operand.kind.value} operand")

    def render_register(self, register: int) -> None:
        self.sink.append(resolve_register(register))

    def _render_memory(self, memory: MemoryOperand) -> None:
        if memory.kind not in (MemoryKind.MEM, MemoryKind.MIB, MemoryKind.AGEN):
            raise OperandError(f"Unknown memory operand kind: {memory.kind!r}")

        self.sink.append("(" if memory.kind is MemoryKind.AGEN else "*(")

        self.render_register(memory.segment)
        self.sink.append(": ")
        self.render_register(memory.base)

        if memory.has_displacement:
            self.sink.append(" + ")
            write_signed(self.sink, memory.displacement)
        elif memory.kind is MemoryKind.MEM and memory.has_index:
            # Only direct memory shows the index, and only without displacement
            self.sink.append(" + ")
            if memory.scale != 1:
                self.sink.append("(")
            self.render_register(memory.index)
            if memory.scale != 1:
                self.sink.append(" * ")
                write_unsigned(self.sink, memory.scale)
                self.sink.append(")")

        self.sink.append(")")

    def _render_immediate(self, operand: DecodedOperand) -> None:
        immediate = operand.immediate
        if immediate.is_relative:
            write_hex(self.sink, to_unsigned64(self.virtual_address + immediate.value))
        elif immediate.is_signed:
            write_signed(self.sink, immediate.value)
        else:
            write_unsigned(self.sink, immediate.value)


def render_operand(operand: DecodedOperand, virtual_address: int = 0,
                   capacity: int = DEFAULT_BUFFER_CAPACITY) -> str:
    """Render a single operand to a string."""
    sink = BoundedTextSink(bytearray(capacity))
    OperandRenderer(sink, virtual_address).render(operand)
    return sink.getvalue()
