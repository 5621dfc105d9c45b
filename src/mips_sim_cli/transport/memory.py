# mips_sim_cli/transport/memory.py
"""
Transport Layer (メモリ書き込みインターフェース)

このモジュールは、設定層がシミュレータのメモリへ32bitワードを書き込むための
最小限のインターフェースと、ドライラン用の疎なメモリ実装を提供します。
"""
from abc import ABC, abstractmethod
from typing import Dict

from mips_sim_cli.common.types import WORD_MASK

# @intent:responsibility 外部シミュレータのメモリに対する書き込みインターフェースを定義します。
class MemoryAccess(ABC):
    """
    ワード単位で読み書きできるメモリの抽象基底クラス。
    RangeLoader はこのインターフェースのみに依存します。
    """
    # @intent:pre-condition アドレスは4の倍数、値は32bitに収まる必要があります。
    @abstractmethod
    def write_word(self, address: int, value: int) -> None:
        pass

    @abstractmethod
    def read_word(self, address: int) -> int:
        pass

# @intent:responsibility 書き込まれたワードのみを保持する疎なメモリ。
# @intent:rationale 32bitアドレス空間全体を確保せず、書き込み済みのアドレスだけを辞書に持ちます。
class SparseMemory(MemoryAccess):
    def __init__(self):
        self._words: Dict[int, int] = {}

    def _check_address(self, address: int) -> None:
        if not 0 <= address <= WORD_MASK:
            raise IndexError(f"Address {address:#x} is outside the 32-bit address space.")
        if address & 3:
            raise ValueError(f"Address {address:#010x} is not word aligned.")

    def write_word(self, address: int, value: int) -> None:
        self._check_address(address)
        if not 0 <= value <= WORD_MASK:
            raise ValueError(f"Data {value} is not a 32-bit value.")
        self._words[address] = value

    def read_word(self, address: int) -> int:
        """
        未書き込みのアドレスは0を返します。
        """
        self._check_address(address)
        return self._words.get(address, 0)

    def words(self) -> Dict[int, int]:
        return dict(sorted(self._words.items()))
