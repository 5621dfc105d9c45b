# mips_sim_cli/config/trap_spec.py
"""
--fail-match のトラップ文字列（I/A/O/J）の解析。
"""
from typing import FrozenSet, Iterable

from mips_sim_cli.common.errors import MalformedValueError
from mips_sim_cli.config.models import TrapKind, TrapSet

TRAP_CODES = {
    "i": TrapKind.INSTRUCTION_UNSUPPORTED,
    "a": TrapKind.ALU_UNSUPPORTED,
    "o": TrapKind.OVERFLOW,
    "j": TrapKind.UNALIGNED_JUMP,
}


def parse_fail_match(raw: str) -> FrozenSet[TrapKind]:
    kinds = set()
    for char in raw:
        kind = TRAP_CODES.get(char.lower())
        if kind is None:
            raise MalformedValueError(f"Unknown fail condition: {char}")
        kinds.add(kind)
    return frozenset(kinds)


# @intent:responsibility 全ての --fail-match の出現を1つの集合にまとめ、期待するトラップを決定します。
# @intent:rationale --fail-match は --expect-fail を暗黙に含みます。値なしの --expect-fail は「任意のトラップ」です。
def build_trap_set(fail_match_values: Iterable[str], expect_fail: bool) -> TrapSet:
    values = list(fail_match_values)
    if values:
        kinds = set()
        for raw in values:
            kinds |= parse_fail_match(raw)
        return TrapSet(kinds=frozenset(kinds))
    if expect_fail:
        return TrapSet.any()
    return TrapSet.none()
