"""
Per-mnemonic translation rules.

Every translated mnemonic maps to a ``TranslationRule``: a template shape
plus the parameters that shape needs (operator text, flag predicate,
trailing comment, intrinsic name). The translator only knows how to emit
each shape; what gets emitted for a given mnemonic lives here.

``terminated`` records whether the shared ``;`` suffix follows the
template. Comparisons and the commented conditional branches end with their
own comment instead, and that difference is part of the output format.

A few outputs differ from older releases of this table: ``jnl`` tests
``sign_flag == overflow_flag`` (it used to print ``sign_flag && overflow_flag``,
which is not the SF = OF condition), ``jrcxz`` is translated, and the
saturating add and byte abs intrinsics name their real element width
(``_mm_adds_epi8``/``_mm_adds_epi16``, ``_mm_abs_epi8``). The 32-bit register
spelling and the ``_mm_packs_epu*`` names are kept as they were.
"""
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Dict, Mapping, Optional

from pseudocoder.mnemonics import Mnemonic


class TemplateShape(Enum):
    """Statement templates the translator can emit"""
    ASSIGNMENT = "assignment"                    # dst <op> src
    COMPARISON = "comparison"                    # compare(a, b) // comment
    CALL = "call"                                # (target)()
    JUMP = "jump"                                # goto target
    CONDITIONAL_BRANCH = "conditional_branch"    # if (predicate) goto target
    VECTOR_MOVE = "vector_move"                  # vector_*_load/store or dst = src
    VECTOR_OP = "vector_op"                      # dst = intrinsic(args)


@dataclass(frozen=True)
class TranslationRule:
    """Template shape and parameters for one mnemonic"""
    shape: TemplateShape
    operator: str = ""
    predicate: str = ""
    comment: Optional[str] = None
    intrinsic: Optional[str] = None
    aligned: bool = False
    terminated: bool = True


def _assign(operator: str) -> TranslationRule:
    return TranslationRule(TemplateShape.ASSIGNMENT, operator=operator)


def _compare(flags: str) -> TranslationRule:
    return TranslationRule(TemplateShape.COMPARISON, comment=f"set {flags}",
                           terminated=False)


def _branch(predicate: str, comment: Optional[str] = None) -> TranslationRule:
    return TranslationRule(TemplateShape.CONDITIONAL_BRANCH, predicate=predicate,
                           comment=comment, terminated=comment is None)


def _aligned_move(suffix: str) -> TranslationRule:
    return TranslationRule(TemplateShape.VECTOR_MOVE, intrinsic=suffix, aligned=True)


def _unaligned_move(suffix: str) -> TranslationRule:
    return TranslationRule(TemplateShape.VECTOR_MOVE, intrinsic=suffix, aligned=False)


def _vector_op(intrinsic: Optional[str]) -> TranslationRule:
    return TranslationRule(TemplateShape.VECTOR_OP, intrinsic=intrinsic)


_VECTOR_INTRINSICS: Dict[str, tuple] = {
    # bitwise and / andnot / or
    "_mm_and_si": (Mnemonic.PAND, Mnemonic.VPAND),
    "_mm_and_epi64": (Mnemonic.VPANDQ,),
    "_mm_and_epi32": (Mnemonic.VPANDD,),
    "_mm_andnot_si": (Mnemonic.PANDN, Mnemonic.VPANDN),
    "_mm_andnot_epi64": (Mnemonic.VPANDNQ,),
    "_mm_andnot_epi32": (Mnemonic.VPANDND,),
    "_mm_or_si": (Mnemonic.POR, Mnemonic.VPOR),
    "_mm_or_epi32": (Mnemonic.VPORD,),
    "_mm_or_epi64": (Mnemonic.VPORQ,),

    # compares
    "_mm_cmpeq_epi8": (Mnemonic.PCMPEQB, Mnemonic.VPCMPEQB),
    "_mm_cmpeq_epi16": (Mnemonic.PCMPEQW, Mnemonic.VPCMPEQW),
    "_mm_cmpeq_epi32": (Mnemonic.PCMPEQD, Mnemonic.VPCMPEQD),
    "_mm_cmpeq_epi64": (Mnemonic.PCMPEQQ, Mnemonic.VPCMPEQQ),
    "_mm_cmpgt_epi8": (Mnemonic.PCMPGTB, Mnemonic.VPCMPGTB),
    "_mm_cmpgt_epi16": (Mnemonic.PCMPGTW, Mnemonic.VPCMPGTW),
    "_mm_cmpgt_epi32": (Mnemonic.PCMPGTD, Mnemonic.VPCMPGTD),
    "_mm_cmpgt_epi64": (Mnemonic.PCMPGTQ, Mnemonic.VPCMPGTQ),

    # packs
    "_mm_packus_epu16_to_epi8": (Mnemonic.PACKUSWB, Mnemonic.VPACKUSWB),
    "_mm_packus_epu32_to_epi16": (Mnemonic.PACKUSDW, Mnemonic.VPACKUSDW),
    "_mm_packs_epu16_to_epi8": (Mnemonic.PACKSSWB, Mnemonic.VPACKSSWB),
    "_mm_packs_epu32_to_epi16": (Mnemonic.PACKSSDW, Mnemonic.VPACKSSDW),

    # integer arithmetic
    "_mm_add_epi8": (Mnemonic.PADDB, Mnemonic.VPADDB),
    "_mm_add_epi16": (Mnemonic.PADDW, Mnemonic.VPADDW),
    "_mm_add_epi32": (Mnemonic.PADDD, Mnemonic.VPADDD),
    "_mm_add_epi64": (Mnemonic.PADDQ, Mnemonic.VPADDQ),
    "_mm_adds_epi8": (Mnemonic.PADDSB, Mnemonic.VPADDSB),
    "_mm_adds_epi16": (Mnemonic.PADDSW, Mnemonic.VPADDSW),
    "_mm_pmadd_epi16": (Mnemonic.PMADDWD, Mnemonic.VPMADDWD),
    "_mm_mulhi_epi16": (Mnemonic.PMULHW, Mnemonic.VPMULHW),
    "_mm_mullo_epi16": (Mnemonic.PMULLW, Mnemonic.VPMULLW),
    "_mm_abs_epi8": (Mnemonic.PABSB, Mnemonic.VPABSB),
    "_mm_abs_epi16": (Mnemonic.PABSW, Mnemonic.VPABSW),
    "_mm_abs_epi32": (Mnemonic.PABSD, Mnemonic.VPABSD),
    "_mm_alignr_epi8": (Mnemonic.PALIGNR, Mnemonic.VPALIGNR),
    "_mm_avg_epu8": (Mnemonic.PAVGB, Mnemonic.VPAVGB),
    "_mm_avg_epu16": (Mnemonic.PAVGW, Mnemonic.VPAVGW),
    "_mm_empty": (Mnemonic.EMMS,),

    # floating point
    "_mm_addsub_ps": (Mnemonic.ADDSUBPS, Mnemonic.VADDSUBPS),
    "_mm_addsub_pd": (Mnemonic.ADDSUBPD, Mnemonic.VADDSUBPD),

    # blends
    "_mm_blend_epi16": (Mnemonic.PBLENDW, Mnemonic.VPBLENDW),
    "_mm_blend_epi32": (Mnemonic.VPBLENDD,),
    "_mm_blend_ps": (Mnemonic.BLENDPS, Mnemonic.VBLENDPS),
    "_mm_blend_pd": (Mnemonic.BLENDPD, Mnemonic.VBLENDPD),
    "_mm_blendv_epi8": (Mnemonic.PBLENDVB, Mnemonic.VPBLENDVB),
    "_mm_blendv_ps": (Mnemonic.BLENDVPS, Mnemonic.VBLENDVPS),
    "_mm_blendv_pd": (Mnemonic.BLENDVPD, Mnemonic.VBLENDVPD),

    # broadcasts
    "_mm_broadcast_f128": (Mnemonic.VBROADCASTF128,),
    "_mm_broadcast_f32x2": (Mnemonic.VBROADCASTF32X2,),
    "_mm_broadcast_f32x4": (Mnemonic.VBROADCASTF32X4,),
    "_mm_broadcast_f32x8": (Mnemonic.VBROADCASTF32X8,),
    "_mm_broadcast_f64x2": (Mnemonic.VBROADCASTF64X2,),
    "_mm_broadcast_f64x4": (Mnemonic.VBROADCASTF64X4,),
    "_mm_broadcastsi128_si256": (Mnemonic.VBROADCASTI128,),
    "_mm_broadcast_i32x2": (Mnemonic.VBROADCASTI32X2,),
    "_mm_broadcast_i32x4": (Mnemonic.VBROADCASTI32X4,),
    "_mm_broadcast_i32x8": (Mnemonic.VBROADCASTI32X8,),
    "_mm_broadcast_i64x2": (Mnemonic.VBROADCASTI64X2,),
    "_mm_broadcast_i64x4": (Mnemonic.VBROADCASTI64X4,),
    "_mm_broadcast_sd": (Mnemonic.VBROADCASTSD,),
    "_mm_broadcast_ss": (Mnemonic.VBROADCASTSS,),
    "_mm_broadcast_epi8": (Mnemonic.VPBROADCASTB,),
    "_mm_broadcast_epi16": (Mnemonic.VPBROADCASTW,),
    "_mm_broadcast_epi32": (Mnemonic.VPBROADCASTD,),
    "_mm_broadcast_epi64": (Mnemonic.VPBROADCASTQ,),
    "_mm_broadcastmb_epi64": (Mnemonic.VPBROADCASTMB2Q,),
    "_mm_broadcastmw_epi32": (Mnemonic.VPBROADCASTMW2D,),
}


_RULES: Dict[Mnemonic, TranslationRule] = {
    # Assignments
    Mnemonic.MOV: _assign(" = "),
    Mnemonic.LEA: _assign(" = &"),
    Mnemonic.SUB: _assign(" -= "),
    Mnemonic.ADD: _assign(" += "),
    Mnemonic.AND: _assign(" &= "),
    Mnemonic.OR: _assign(" |= "),

    # Comparisons
    Mnemonic.TEST: _compare("carry_flag, parity_flag, zero_flag"),
    Mnemonic.CMP: _compare(
        "carry_flag, overflow_flag, signed_flag, zero_flag, aux_carry_flag and parity_flag"
    ),

    # Unconditional control transfer
    Mnemonic.CALL: TranslationRule(TemplateShape.CALL),
    Mnemonic.JMP: TranslationRule(TemplateShape.JUMP),

    # Conditional branches
    Mnemonic.JB: _branch("carry_flag", "if below"),
    Mnemonic.JBE: _branch("carry_flag || zero_flag", "if below or equal"),
    Mnemonic.JCXZ: _branch("(u16)c == 0"),
    Mnemonic.JECXZ: _branch("(u32)c == 0"),
    Mnemonic.JRCXZ: _branch("(u64)c == 0"),
    Mnemonic.JL: _branch("sign_flag != overflow_flag", "if less"),
    Mnemonic.JLE: _branch("zero_flag || sign_flag != overflow_flag", "if less or equal"),
    Mnemonic.JNB: _branch("!carry_flag", "if not below"),
    Mnemonic.JNBE: _branch("!carry_flag && !zero_flag", "if not below or equal"),
    Mnemonic.JNL: _branch("sign_flag == overflow_flag", "if not less"),
    Mnemonic.JNLE: _branch("!zero_flag && sign_flag == overflow_flag", "if not less or equal"),
    Mnemonic.JNO: _branch("!overflow_flag"),
    Mnemonic.JNP: _branch("!parity_flag"),
    Mnemonic.JNS: _branch("!sign_flag"),
    Mnemonic.JNZ: _branch("!zero_flag", "if not zero / not equal"),
    Mnemonic.JO: _branch("overflow_flag"),
    Mnemonic.JP: _branch("parity_flag"),
    Mnemonic.JS: _branch("sign_flag"),
    Mnemonic.JZ: _branch("zero_flag", "if zero / equal"),

    # Aligned vector moves
    Mnemonic.MOVAPS: _aligned_move("_ps"),
    Mnemonic.MOVAPD: _aligned_move("_pd"),
    Mnemonic.VMOVDQA: _aligned_move("_si"),
    Mnemonic.VMOVDQA32: _aligned_move("_epi32"),
    Mnemonic.VMOVDQA64: _aligned_move("_epi64"),

    # Unaligned vector moves
    Mnemonic.MOVUPS: _unaligned_move("_ps"),
    Mnemonic.MOVUPD: _unaligned_move("_pd"),
    Mnemonic.MOVQ: _unaligned_move("_si64"),
    Mnemonic.LDDQU: _unaligned_move("_cross_cache_line_si"),
    Mnemonic.VMOVD: _unaligned_move("_si32"),
    Mnemonic.VMOVDQU: _unaligned_move("_si"),
    Mnemonic.VMOVDQU8: _unaligned_move("_epi8"),
    Mnemonic.VMOVDQU16: _unaligned_move("_epi16"),
    Mnemonic.VMOVDQU32: _unaligned_move("_epi32"),
    Mnemonic.VMOVDQU64: _unaligned_move("_epi64"),
}

for _intrinsic, _mnemonics in _VECTOR_INTRINSICS.items():
    for _mnemonic in _mnemonics:
        _RULES[_mnemonic] = _vector_op(_intrinsic)

del _intrinsic, _mnemonics, _mnemonic

DEFAULT_RULES: Mapping[Mnemonic, TranslationRule] = MappingProxyType(_RULES)


def get_rule(mnemonic: Mnemonic,
             rules: Mapping[Mnemonic, TranslationRule] = DEFAULT_RULES) -> Optional[TranslationRule]:
    """Return the rule for ``mnemonic`` or None when it has no translation."""
    return rules.get(mnemonic)
