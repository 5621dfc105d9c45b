# mips_sim_cli/core/dry_run.py
"""
ドライラン・バックエンド。

外部シミュレーションエンジンなしでCLIを動作させるため、設定された内容を記録し、
play() で有効な構成とメモリイメージをYAMLとして出力します。命令は実行しません。
"""
import os
import sys
from typing import Dict, List, Optional, TextIO

import yaml

from mips_sim_cli.common.errors import StructuralError
from mips_sim_cli.common.types import SymbolTable
from mips_sim_cli.config.cache_spec import format_cache_spec
from mips_sim_cli.config.models import CacheConfig, DumpRange, MachineConfig, TrapKind
from mips_sim_cli.core.machine import (
    AbstractAssembler,
    AbstractMachine,
    AbstractReporter,
    AbstractTracer,
    SimulatorBackend,
)
from mips_sim_cli.loader.assembler import LabelScanAssembler
from mips_sim_cli.transport.memory import MemoryAccess, SparseMemory


class RecordingTracer(AbstractTracer):
    def __init__(self):
        self.stages: List[str] = []
        self.registers: List[str] = []
        self.gp: List[int] = []

    def fetch(self) -> None:
        self.stages.append("fetch")

    def decode(self) -> None:
        self.stages.append("decode")

    def execute(self) -> None:
        self.stages.append("execute")

    def memory(self) -> None:
        self.stages.append("memory")

    def writeback(self) -> None:
        self.stages.append("writeback")

    def reg_pc(self) -> None:
        self.registers.append("pc")

    def reg_gp(self, number: int) -> None:
        if number not in self.gp:
            self.gp.append(number)

    def reg_lo(self) -> None:
        self.registers.append("lo")

    def reg_hi(self) -> None:
        self.registers.append("hi")


class RecordingReporter(AbstractReporter):
    def __init__(self):
        self.dumps: List[str] = []
        self.expected_traps: List[Optional[TrapKind]] = []
        self.dump_ranges: List[DumpRange] = []

    def regs(self) -> None:
        self.dumps.append("registers")

    def cache_stats(self) -> None:
        self.dumps.append("cache-stats")

    def cycles(self) -> None:
        self.dumps.append("cycles")

    def expect_fail(self, kind: Optional[TrapKind]) -> None:
        self.expected_traps.append(kind)

    def add_dump_range(self, start: int, length: int, filename: str) -> None:
        self.dump_ranges.append(DumpRange(start=start, length=length, filename=filename))


# @intent:responsibility 構成とメモリを保持するだけのマシン。
# @intent:rationale 実行ファイルのロード時は存在確認のみ行い、ELFの解析は外部エンジンに委ねます。
class DryRunMachine(AbstractMachine):
    def __init__(self, config: MachineConfig, load_executable: bool, out: Optional[TextIO] = None):
        super().__init__(config)
        if load_executable and not os.path.isfile(config.elf):
            raise StructuralError(f"Cannot open ELF file {config.elf}")
        self._memory = SparseMemory()
        # アセンブル時に構築されるまでシンボルテーブルは存在しない
        self._symtab: Optional[SymbolTable] = None
        self._out = out
        self.tracer: Optional[RecordingTracer] = None
        self.reporter: Optional[RecordingReporter] = None

    def symbol_table(self) -> Optional[SymbolTable]:
        return self._symtab

    def symbol_table_rw(self) -> SymbolTable:
        if self._symtab is None:
            self._symtab = SymbolTable()
        return self._symtab

    def memory_rw(self) -> MemoryAccess:
        return self._memory

    def play(self) -> int:
        out = self._out if self._out is not None else sys.stdout
        yaml.safe_dump(self.describe(), out, sort_keys=False)
        return 0

    # @intent:responsibility YAML出力用に、構成・トレース・レポート・メモリの内容を辞書化します。
    def describe(self) -> Dict:
        config = self._config
        summary = {
            "machine": {
                "file": config.elf,
                "pipelined": config.pipelined,
                "delay_slot": config.delay_slot,
                "memory": {
                    "read_time": config.read_time,
                    "write_time": config.write_time,
                    "burst_time": config.burst_time,
                },
                "data_cache": _describe_cache(config.data_cache),
                "instruction_cache": _describe_cache(config.instruction_cache),
            },
        }
        if self.tracer is not None:
            summary["trace"] = {
                "stages": list(self.tracer.stages),
                "registers": list(self.tracer.registers),
                "gp": list(self.tracer.gp),
            }
        if self.reporter is not None:
            summary["report"] = {
                "dump": list(self.reporter.dumps),
                "expect_fail": ["any" if kind is None else kind.name for kind in self.reporter.expected_traps],
                "dump_ranges": [
                    {"start": f"{r.start:#010x}", "length": r.length, "file": r.filename}
                    for r in self.reporter.dump_ranges
                ],
            }
        if self._symtab is not None:
            summary["symbols"] = {name: f"{value:#010x}" for name, value in self._symtab.as_map().items()}
        summary["memory"] = {f"{addr:#010x}": f"{value:#010x}" for addr, value in self._memory.words().items()}
        return summary


def _describe_cache(cache: CacheConfig):
    if not cache.enabled:
        return "disabled"
    return format_cache_spec(cache)


class DryRunBackend(SimulatorBackend):
    def __init__(self, out: Optional[TextIO] = None):
        self._out = out

    def create_machine(self, config: MachineConfig, load_executable: bool) -> DryRunMachine:
        return DryRunMachine(config, load_executable, out=self._out)

    def create_tracer(self, machine: DryRunMachine) -> RecordingTracer:
        machine.tracer = RecordingTracer()
        return machine.tracer

    def create_reporter(self, machine: DryRunMachine) -> RecordingReporter:
        machine.reporter = RecordingReporter()
        return machine.reporter

    def create_assembler(self, machine: DryRunMachine) -> AbstractAssembler:
        return LabelScanAssembler(machine.symbol_table_rw(), machine.memory_rw())
