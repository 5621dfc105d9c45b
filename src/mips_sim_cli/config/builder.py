from dataclasses import replace
from typing import List, Optional
import warnings

from mips_sim_cli.cli.options import RawOptions
from mips_sim_cli.common.errors import AssemblyError, MalformedValueError, StructuralError
from mips_sim_cli.common.types import SymbolTable
from mips_sim_cli.config.cache_spec import parse_cache_spec
from mips_sim_cli.config.loader import PresetLoader
from mips_sim_cli.config.models import MachineConfig, ReportConfig, TraceConfig
from mips_sim_cli.config.range_spec import parse_dump_range, parse_load_range
from mips_sim_cli.config.register_spec import parse_trace_gp
from mips_sim_cli.config.trap_spec import build_trap_set
from mips_sim_cli.config.values import parse_c_integer
from mips_sim_cli.core.machine import AbstractMachine, AbstractReporter, AbstractTracer, SimulatorBackend
from mips_sim_cli.loader.loader import RangeLoader

_PIPELINE_STAGE_FLAGS = ("trace-decode", "trace-execute", "trace-memory", "trace-writeback")

# @intent:responsibility コマンドライン入力を検証済みの構成に変換し、バックエンドに順番どおり適用します。
# @intent:rationale 全ての検証エラーはシミュレーション資源の確保前に例外として表面化し、
#                  部分的な構成がバックエンドに渡ることはありません。
class ConfigurationBuilder:
    def __init__(self, options: RawOptions, backend: SimulatorBackend,
                 preset_loader: Optional[PresetLoader] = None, range_loader: Optional[RangeLoader] = None):
        self._options = options
        self._backend = backend
        self._preset_loader = preset_loader or PresetLoader()
        self._range_loader = range_loader or RangeLoader()

    def build_machine_config(self) -> MachineConfig:
        """
        位置引数、プリセット、パイプライン/遅延スロット、メモリ時間、キャッシュの順に適用します。
        """
        opts = self._options
        if len(opts.positional) != 1:
            raise StructuralError("Single ELF file has to be specified")

        preset = opts.last("config")
        if preset is not None:
            config = self._preset_loader.load_from_file(preset)
        else:
            config = MachineConfig(elf="")

        config = replace(
            config,
            elf=opts.positional[0],
            delay_slot=config.delay_slot and not opts.is_set("no-delay-slot"),
            pipelined=config.pipelined or opts.is_set("pipelined"),
            read_time=self._last_int("read-time", config.read_time),
            write_time=self._last_int("write-time", config.write_time),
            burst_time=self._last_int("burst-time", config.burst_time),
        )

        d_cache = opts.last("d-cache")
        if d_cache is not None:
            config = replace(config, data_cache=parse_cache_spec(d_cache, "data", config.data_cache))
        i_cache = opts.last("i-cache")
        if i_cache is not None:
            config = replace(config, instruction_cache=parse_cache_spec(i_cache, "instruction", config.instruction_cache))
        return config

    def _last_int(self, name: str, default: int) -> int:
        raw = self._options.last(name)
        if raw is None:
            return default
        try:
            return parse_c_integer(raw)
        except ValueError:
            raise MalformedValueError(f"Invalid value for --{name}: {raw}") from None

    # @intent:responsibility トレース設定を構築します。デコード以降のステージはパイプライン構成時のみ有効です。
    def build_trace_config(self, pipelined: bool) -> TraceConfig:
        opts = self._options
        if not pipelined:
            ignored = [name for name in _PIPELINE_STAGE_FLAGS if opts.is_set(name)]
            if ignored:
                warnings.warn(
                    f"{', '.join('--' + n for n in ignored)} ignored without pipelined core", UserWarning)

        return TraceConfig(
            fetch=opts.is_set("trace-fetch"),
            decode=pipelined and opts.is_set("trace-decode"),
            execute=pipelined and opts.is_set("trace-execute"),
            memory=pipelined and opts.is_set("trace-memory"),
            writeback=pipelined and opts.is_set("trace-writeback"),
            pc=opts.is_set("trace-pc"),
            lo=opts.is_set("trace-lo"),
            hi=opts.is_set("trace-hi"),
            gp=parse_trace_gp(opts.values_of("trace-gp")),
        )

    def build_report_config(self, symtab: Optional[SymbolTable]) -> ReportConfig:
        opts = self._options
        return ReportConfig(
            dump_registers=opts.is_set("dump-registers"),
            dump_cache_stats=opts.is_set("dump-cache-stats"),
            dump_cycles=opts.is_set("dump-cycles"),
            expected_traps=build_trap_set(opts.values_of("fail-match"), opts.is_set("expect-fail")),
            dump_ranges=tuple(parse_dump_range(raw, symtab) for raw in opts.values_of("dump-range")),
        )

    # @intent:responsibility load-range を指定順に解析・ロードします。
    # @intent:rationale アセンブル後に呼ばれるため、ソース中のラベルを開始アドレスに使用できます。
    def load_ranges(self, machine: AbstractMachine) -> List[int]:
        written = []
        for raw in self._options.values_of("load-range"):
            request = parse_load_range(raw, machine.symbol_table())
            written.append(self._range_loader.load(machine.memory_rw(), request.start, request.filename))
        return written

    def run(self) -> int:
        """
        構成を構築してバックエンドに適用し、マシンの終了コードを返します。
        """
        asm_source = self._options.is_set("asm")
        config = self.build_machine_config()
        machine = self._backend.create_machine(config, load_executable=not asm_source)

        tracer = self._backend.create_tracer(machine)
        configure_tracer(tracer, self.build_trace_config(config.pipelined))

        reporter = self._backend.create_reporter(machine)
        configure_reporter(reporter, self.build_report_config(machine.symbol_table()))

        if asm_source:
            assembler = self._backend.create_assembler(machine)
            if not assembler.assemble(config.elf):
                raise AssemblyError(f"Assembly of {config.elf} failed")

        self.load_ranges(machine)
        return machine.play()


def configure_tracer(tracer: AbstractTracer, trace: TraceConfig) -> None:
    if trace.fetch:
        tracer.fetch()
    if trace.decode:
        tracer.decode()
    if trace.execute:
        tracer.execute()
    if trace.memory:
        tracer.memory()
    if trace.writeback:
        tracer.writeback()
    if trace.pc:
        tracer.reg_pc()
    for number in sorted(trace.gp):
        tracer.reg_gp(number)
    if trace.lo:
        tracer.reg_lo()
    if trace.hi:
        tracer.reg_hi()


def configure_reporter(reporter: AbstractReporter, report: ReportConfig) -> None:
    if report.dump_registers:
        reporter.regs()
    if report.dump_cache_stats:
        reporter.cache_stats()
    if report.dump_cycles:
        reporter.cycles()

    traps = report.expected_traps
    if traps.any_trap:
        reporter.expect_fail(None)
    else:
        for kind in sorted(traps.kinds, key=lambda k: k.value):
            reporter.expect_fail(kind)

    for dump in report.dump_ranges:
        reporter.add_dump_range(dump.start, dump.length, dump.filename)
