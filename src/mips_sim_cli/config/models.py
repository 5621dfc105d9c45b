from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Tuple


class ReplacementPolicy(Enum):
    RANDOM = "random"
    LRU = "lru"
    LFU = "lfu"


class WritePolicy(Enum):
    WRITE_BACK = "wb"
    WRITE_THROUGH_NOALLOC = "wtna"
    WRITE_THROUGH_ALLOC = "wta"


# @intent:responsibility キャッシュ1段分のパラメータを保持します。キャッシュの挙動そのものは持ちません。
# @intent:rationale ポリシー未指定時の既定値は RANDOM / WRITE_THROUGH_NOALLOC に固定します。
@dataclass(frozen=True)
class CacheConfig:
    enabled: bool = False
    replacement_policy: ReplacementPolicy = ReplacementPolicy.RANDOM
    write_policy: WritePolicy = WritePolicy.WRITE_THROUGH_NOALLOC
    sets: int = 1
    blocks: int = 1  # words in block
    associativity: int = 1

    def __post_init__(self):
        if self.enabled and (self.sets <= 0 or self.blocks <= 0 or self.associativity <= 0):
            raise ValueError("Enabled cache requires non-zero sets, blocks and associativity.")


@dataclass(frozen=True)
class MachineConfig:
    elf: str
    delay_slot: bool = True
    pipelined: bool = False
    read_time: int = 10  # cycles
    write_time: int = 10
    burst_time: int = 0
    data_cache: CacheConfig = field(default_factory=CacheConfig)
    instruction_cache: CacheConfig = field(default_factory=CacheConfig)


@dataclass(frozen=True)
class DumpRange:
    start: int
    length: int
    filename: str


@dataclass(frozen=True)
class LoadRange:
    start: int
    filename: str


class TrapKind(Enum):
    INSTRUCTION_UNSUPPORTED = "I"
    ALU_UNSUPPORTED = "A"
    OVERFLOW = "O"
    UNALIGNED_JUMP = "J"


# @intent:responsibility 実行終了時に期待されるトラップの集合を表します。
# @intent:rationale 「任意のトラップ」は列挙とは別のフラグとして持ち、空集合（トラップなし）と区別します。
@dataclass(frozen=True)
class TrapSet:
    kinds: FrozenSet[TrapKind] = frozenset()
    any_trap: bool = False

    @classmethod
    def none(cls) -> "TrapSet":
        return cls()

    @classmethod
    def any(cls) -> "TrapSet":
        return cls(any_trap=True)

    @property
    def expects_trap(self) -> bool:
        return self.any_trap or bool(self.kinds)


@dataclass(frozen=True)
class TraceConfig:
    fetch: bool = False
    decode: bool = False
    execute: bool = False
    memory: bool = False
    writeback: bool = False
    pc: bool = False
    lo: bool = False
    hi: bool = False
    gp: FrozenSet[int] = frozenset()


@dataclass(frozen=True)
class ReportConfig:
    dump_registers: bool = False
    dump_cache_stats: bool = False
    dump_cycles: bool = False
    expected_traps: TrapSet = field(default_factory=TrapSet)
    dump_ranges: Tuple[DumpRange, ...] = ()
