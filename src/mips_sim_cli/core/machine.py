# mips_sim_cli/core/machine.py
"""
Core Layer (外部協調オブジェクトのインターフェース)

シミュレーションエンジン、トレーサー、レポーター、アセンブラは本パッケージの外部にあり、
設定層はここで定義する狭いインターフェースを介してのみそれらにアクセスします。
"""
from abc import ABC, abstractmethod
from typing import Optional

from mips_sim_cli.common.types import SymbolTable
from mips_sim_cli.config.models import MachineConfig, TrapKind
from mips_sim_cli.transport.memory import MemoryAccess

# @intent:responsibility シミュレーション対象のマシンを抽象化します。
class AbstractMachine(ABC):
    """
    MachineConfig から構築されるマシンの抽象基底クラス。
    """
    def __init__(self, config: MachineConfig):
        self._config = config

    @property
    def config(self) -> MachineConfig:
        return self._config

    # @intent:responsibility シンボルテーブルを返します。存在しない場合は None。
    # @intent:rationale アセンブル前やシンボルを持たない実行ファイルではテーブルが存在しないことがあります。
    @abstractmethod
    def symbol_table(self) -> Optional[SymbolTable]:
        pass

    # @intent:responsibility 読み書き可能なメモリを返します。load-range の書き込み先になります。
    @abstractmethod
    def memory_rw(self) -> MemoryAccess:
        pass

    # @intent:responsibility 実行を開始し、プロセスの終了コードを返します。
    @abstractmethod
    def play(self) -> int:
        pass


# @intent:responsibility トレース対象の有効化インターフェース。出力形式はトレーサー側の責務です。
class AbstractTracer(ABC):
    @abstractmethod
    def fetch(self) -> None:
        pass

    @abstractmethod
    def decode(self) -> None:
        pass

    @abstractmethod
    def execute(self) -> None:
        pass

    @abstractmethod
    def memory(self) -> None:
        pass

    @abstractmethod
    def writeback(self) -> None:
        pass

    @abstractmethod
    def reg_pc(self) -> None:
        pass

    @abstractmethod
    def reg_gp(self, number: int) -> None:
        pass

    @abstractmethod
    def reg_lo(self) -> None:
        pass

    @abstractmethod
    def reg_hi(self) -> None:
        pass


# @intent:responsibility 終了時レポートの設定インターフェース。
class AbstractReporter(ABC):
    @abstractmethod
    def regs(self) -> None:
        pass

    @abstractmethod
    def cache_stats(self) -> None:
        pass

    @abstractmethod
    def cycles(self) -> None:
        pass

    # @intent:responsibility 期待するトラップを追加します。kind が None の場合は任意のトラップを受け入れます。
    @abstractmethod
    def expect_fail(self, kind: Optional[TrapKind]) -> None:
        pass

    @abstractmethod
    def add_dump_range(self, start: int, length: int, filename: str) -> None:
        pass


# @intent:responsibility アセンブラソースをマシンのメモリとシンボルテーブルに展開します。
class AbstractAssembler(ABC):
    @abstractmethod
    def assemble(self, filename: str) -> bool:
        """
        成功した場合は True を返します。診断メッセージの出力はアセンブラ側で行います。
        """
        pass


# @intent:responsibility 具体的なシミュレータ実装を束ねるファクトリ。
# @intent:rationale ConfigurationBuilder はバックエンドの具象クラスを知らずに済みます。
class SimulatorBackend(ABC):
    @abstractmethod
    def create_machine(self, config: MachineConfig, load_executable: bool) -> AbstractMachine:
        pass

    @abstractmethod
    def create_tracer(self, machine: AbstractMachine) -> AbstractTracer:
        pass

    @abstractmethod
    def create_reporter(self, machine: AbstractMachine) -> AbstractReporter:
        pass

    @abstractmethod
    def create_assembler(self, machine: AbstractMachine) -> AbstractAssembler:
        pass
