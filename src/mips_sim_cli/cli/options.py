# mips_sim_cli/cli/options.py
"""
コマンドラインオプションの定義と解析。

QCommandLineParser を使用し、繰り返し指定可能なオプションの全ての出現を順序どおりに保持した
RawOptions に変換します。値の意味の解釈は ConfigurationBuilder の責務です。
"""
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Tuple

from PySide6.QtCore import QCommandLineOption, QCommandLineParser, QCoreApplication

from mips_sim_cli.common.errors import MalformedValueError

APPLICATION_NAME = "mips-sim-cli"
APPLICATION_VERSION = "0.1.0"

# @intent:data_structure (名前のリスト, 説明, 値の名前)。値の名前が空のオプションはフラグです。
OPTION_SPECS: List[Tuple[List[str], str, str]] = [
    (["asm"], "Treat provided file argument as assembler source.", ""),
    (["pipelined"], "Configure CPU to use five stage pipeline.", ""),
    (["no-delay-slot"], "Disable jump delay slot.", ""),
    (["trace-fetch", "tr-fetch"], "Trace fetched instruction (for both pipelined and not core).", ""),
    (["trace-decode", "tr-decode"], "Trace instruction in decode stage. (only for pipelined core)", ""),
    (["trace-execute", "tr-execute"], "Trace instruction in execute stage. (only for pipelined core)", ""),
    (["trace-memory", "tr-memory"], "Trace instruction in memory stage. (only for pipelined core)", ""),
    (["trace-writeback", "tr-writeback"], "Trace instruction in write back stage. (only for pipelined core)", ""),
    (["trace-pc", "tr-pc"], "Print program counter register changes.", ""),
    (["trace-gp", "tr-gp"], "Print general purpose register changes. You can use * for all registers.", "REG"),
    (["trace-lo", "tr-lo"], "Print LO register changes.", ""),
    (["trace-hi", "tr-hi"], "Print HI register changes.", ""),
    (["dump-registers", "d-regs"], "Dump registers state at program exit.", ""),
    (["dump-cache-stats"], "Dump cache statistics at program exit.", ""),
    (["dump-cycles"], "Dump number of CPU cycles till program end.", ""),
    (["dump-range"], "Dump memory range.", "START,LENGTH,FNAME"),
    (["load-range"], "Load memory range.", "START,FNAME"),
    (["expect-fail"], "Expect that program causes CPU trap and fail if it doesn't.", ""),
    (["fail-match"],
     "Program should exit with exactly this CPU TRAP. Possible values are I(unsupported Instruction), "
     "A(Unsupported ALU operation), O(Overflow/underflow) and J(Unaligned Jump). You can freely combine them. "
     "Using this implies expect-fail option.", "TRAP"),
    (["d-cache"], "Data cache. Format policy,sets,words_in_blocks,associativity where policy is random/lru/lfu", "DCACHE"),
    (["i-cache"], "Instruction cache. Format policy,sets,words_in_blocks,associativity where policy is random/lru/lfu", "ICACHE"),
    (["read-time"], "Memory read access time (cycles).", "RTIME"),
    (["write-time"], "Memory write access time (cycles).", "WTIME"),
    (["burst-time"], "Memory burst access time (cycles).", "BTIME"),
    (["config"], "Machine preset (YAML) providing defaults for the options above.", "PRESET"),
]


# @intent:responsibility 解析済みのコマンドライン入力を不変に保持します。
@dataclass(frozen=True)
class RawOptions:
    """
    オプション名は OPTION_SPECS の先頭の名前で正規化されています。
    values は各出現の値を指定順に保持します。
    """
    positional: Tuple[str, ...] = ()
    flags: FrozenSet[str] = frozenset()
    values: Dict[str, Tuple[str, ...]] = field(default_factory=dict)

    def is_set(self, name: str) -> bool:
        return name in self.flags or bool(self.values.get(name))

    def values_of(self, name: str) -> List[str]:
        return list(self.values.get(name, ()))

    # @intent:rationale 「最後の出現が有効」のオプション用。
    def last(self, name: str) -> Optional[str]:
        values = self.values.get(name, ())
        return values[-1] if values else None


# @intent:responsibility QCommandLineParser を構築します。
def create_parser() -> QCommandLineParser:
    QCoreApplication.setApplicationName(APPLICATION_NAME)
    QCoreApplication.setApplicationVersion(APPLICATION_VERSION)

    p = QCommandLineParser()
    p.setApplicationDescription("MIPS CLI machine simulator")
    p.addHelpOption()
    p.addVersionOption()
    p.addPositionalArgument("FILE", "Input ELF executable file or assembler source")

    for names, description, value_name in OPTION_SPECS:
        p.addOption(QCommandLineOption(names, description, value_name))
    return p


def to_raw_options(p: QCommandLineParser) -> RawOptions:
    flags = set()
    values = {}
    for names, _, value_name in OPTION_SPECS:
        name = names[0]
        if value_name:
            occurrences = tuple(p.values(name))
            if occurrences:
                values[name] = occurrences
        elif p.isSet(name):
            flags.add(name)
    for name in ("help", "version"):
        if p.isSet(name):
            flags.add(name)
    return RawOptions(
        positional=tuple(p.positionalArguments()),
        flags=frozenset(flags),
        values=values,
    )


def parse_arguments(argv: Sequence[str]) -> RawOptions:
    """
    argv[0] はプログラム名として扱います。--help / --version は "help" / "version" フラグとして
    返し、表示は呼び出し元が行います。解析エラーは MalformedValueError として送出します。
    """
    p = create_parser()
    if not p.parse(list(argv)):
        raise MalformedValueError(p.errorText())
    return to_raw_options(p)


def help_text() -> str:
    p = create_parser()
    return p.helpText()
