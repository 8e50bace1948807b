"""x86 mnemonic identifiers"""
from enum import Enum


class Mnemonic(Enum):
    """
    Decoded instruction mnemonics.

    Values are the canonical lowercase assembler spellings. Only part of the
    set has a pseudo-code translation; see ``pseudocoder.rules``.
    """
    INVALID = "invalid"

    # Data movement and integer arithmetic
    MOV = "mov"
    LEA = "lea"
    ADD = "add"
    SUB = "sub"
    AND = "and"
    OR = "or"
    XOR = "xor"
    INC = "inc"
    DEC = "dec"
    NEG = "neg"
    NOT = "not"
    IMUL = "imul"
    SHL = "shl"
    SHR = "shr"
    SAR = "sar"
    PUSH = "push"
    POP = "pop"
    XCHG = "xchg"
    MOVZX = "movzx"
    MOVSX = "movsx"
    NOP = "nop"
    INT3 = "int3"
    LEAVE = "leave"

    # Comparison
    TEST = "test"
    CMP = "cmp"

    # Control transfer
    CALL = "call"
    RET = "ret"
    JMP = "jmp"
    JB = "jb"
    JBE = "jbe"
    JCXZ = "jcxz"
    JECXZ = "jecxz"
    JRCXZ = "jrcxz"
    JL = "jl"
    JLE = "jle"
    JNB = "jnb"
    JNBE = "jnbe"
    JNL = "jnl"
    JNLE = "jnle"
    JNO = "jno"
    JNP = "jnp"
    JNS = "jns"
    JNZ = "jnz"
    JO = "jo"
    JP = "jp"
    JS = "js"
    JZ = "jz"
    LOOP = "loop"

    # Bound registers
    BNDMK = "bndmk"
    BNDLDX = "bndldx"
    BNDSTX = "bndstx"

    # Vector moves, aligned
    MOVAPS = "movaps"
    MOVAPD = "movapd"
    VMOVDQA = "vmovdqa"
    VMOVDQA32 = "vmovdqa32"
    VMOVDQA64 = "vmovdqa64"

    # Vector moves, unaligned
    MOVUPS = "movups"
    MOVUPD = "movupd"
    MOVQ = "movq"
    LDDQU = "lddqu"
    VMOVD = "vmovd"
    VMOVDQU = "vmovdqu"
    VMOVDQU8 = "vmovdqu8"
    VMOVDQU16 = "vmovdqu16"
    VMOVDQU32 = "vmovdqu32"
    VMOVDQU64 = "vmovdqu64"
    MOVDQA = "movdqa"
    MOVDQU = "movdqu"

    # Vector bitwise logic
    PAND = "pand"
    VPAND = "vpand"
    VPANDQ = "vpandq"
    VPANDD = "vpandd"
    PANDN = "pandn"
    VPANDN = "vpandn"
    VPANDNQ = "vpandnq"
    VPANDND = "vpandnd"
    POR = "por"
    VPOR = "vpor"
    VPORD = "vpord"
    VPORQ = "vporq"
    PXOR = "pxor"

    # Vector compares
    PCMPEQB = "pcmpeqb"
    PCMPEQW = "pcmpeqw"
    PCMPEQD = "pcmpeqd"
    PCMPEQQ = "pcmpeqq"
    VPCMPEQB = "vpcmpeqb"
    VPCMPEQW = "vpcmpeqw"
    VPCMPEQD = "vpcmpeqd"
    VPCMPEQQ = "vpcmpeqq"
    PCMPGTB = "pcmpgtb"
    PCMPGTW = "pcmpgtw"
    PCMPGTD = "pcmpgtd"
    PCMPGTQ = "pcmpgtq"
    VPCMPGTB = "vpcmpgtb"
    VPCMPGTW = "vpcmpgtw"
    VPCMPGTD = "vpcmpgtd"
    VPCMPGTQ = "vpcmpgtq"

    # Vector packs
    PACKUSWB = "packuswb"
    PACKUSDW = "packusdw"
    VPACKUSWB = "vpackuswb"
    VPACKUSDW = "vpackusdw"
    PACKSSWB = "packsswb"
    PACKSSDW = "packssdw"
    VPACKSSWB = "vpacksswb"
    VPACKSSDW = "vpackssdw"

    # Vector integer arithmetic
    PADDB = "paddb"
    PADDW = "paddw"
    PADDD = "paddd"
    PADDQ = "paddq"
    VPADDB = "vpaddb"
    VPADDW = "vpaddw"
    VPADDD = "vpaddd"
    VPADDQ = "vpaddq"
    PADDSB = "paddsb"
    PADDSW = "paddsw"
    VPADDSB = "vpaddsb"
    VPADDSW = "vpaddsw"
    PMADDWD = "pmaddwd"
    VPMADDWD = "vpmaddwd"
    PMULHW = "pmulhw"
    VPMULHW = "vpmulhw"
    PMULLW = "pmullw"
    VPMULLW = "vpmullw"
    PABSB = "pabsb"
    VPABSB = "vpabsb"
    PABSW = "pabsw"
    VPABSW = "vpabsw"
    PABSD = "pabsd"
    VPABSD = "vpabsd"
    PAVGB = "pavgb"
    VPAVGB = "vpavgb"
    PAVGW = "pavgw"
    VPAVGW = "vpavgw"
    PALIGNR = "palignr"
    VPALIGNR = "vpalignr"
    EMMS = "emms"

    # Vector floating point
    ADDSUBPS = "addsubps"
    VADDSUBPS = "vaddsubps"
    ADDSUBPD = "addsubpd"
    VADDSUBPD = "vaddsubpd"

    # Blends
    PBLENDW = "pblendw"
    VPBLENDW = "vpblendw"
    PBLENDVB = "pblendvb"
    VPBLENDVB = "vpblendvb"
    VPBLENDD = "vpblendd"
    BLENDPS = "blendps"
    VBLENDPS = "vblendps"
    BLENDPD = "blendpd"
    VBLENDPD = "vblendpd"
    BLENDVPS = "blendvps"
    VBLENDVPS = "vblendvps"
    BLENDVPD = "blendvpd"
    VBLENDVPD = "vblendvpd"

    # Broadcasts
    VBROADCASTF128 = "vbroadcastf128"
    VBROADCASTF32X2 = "vbroadcastf32x2"
    VBROADCASTF32X4 = "vbroadcastf32x4"
    VBROADCASTF32X8 = "vbroadcastf32x8"
    VBROADCASTF64X2 = "vbroadcastf64x2"
    VBROADCASTF64X4 = "vbroadcastf64x4"
    VBROADCASTI128 = "vbroadcasti128"
    VBROADCASTI32X2 = "vbroadcasti32x2"
    VBROADCASTI32X4 = "vbroadcasti32x4"
    VBROADCASTI32X8 = "vbroadcasti32x8"
    VBROADCASTI64X2 = "vbroadcasti64x2"
    VBROADCASTI64X4 = "vbroadcasti64x4"
    VBROADCASTSD = "vbroadcastsd"
    VBROADCASTSS = "vbroadcastss"
    VPBROADCASTB = "vpbroadcastb"
    VPBROADCASTW = "vpbroadcastw"
    VPBROADCASTD = "vpbroadcastd"
    VPBROADCASTQ = "vpbroadcastq"
    VPBROADCASTMB2Q = "vpbroadcastmb2q"
    VPBROADCASTMW2D = "vpbroadcastmw2d"

    @classmethod
    def from_text(cls, text: str) -> "Mnemonic":
        """Map an assembler spelling to a mnemonic, ``INVALID`` when unknown."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            return cls.INVALID
