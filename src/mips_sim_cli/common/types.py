"""
共通の型定義を提供するモジュール。
設定層、ローダー、バックエンドで共通して使用される型エイリアスとシンボルテーブルを定義します。
"""
from typing import Dict, Optional

# @intent:data_structure シンボル名とアドレスをマッピングする辞書の型エイリアス。
SymbolMap = Dict[str, int]

WORD_MASK = 0xFFFFFFFF

# @intent:responsibility 名前からアドレスを引く読み取り用シンボルテーブル。
# @intent:rationale 範囲指定の解決はシンボルテーブルの有無に依存するため、
#                  グローバルではなく Optional[SymbolTable] として明示的に受け渡します。
class SymbolTable:
    """
    シンボル名と32bitアドレスの対応表。
    アセンブラやELFローダーがバックエンド側で構築し、設定層は resolve() のみを使用します。
    """
    def __init__(self, symbols: Optional[SymbolMap] = None):
        self._symbols: SymbolMap = {}
        if symbols:
            for name, value in symbols.items():
                self.add(name, value)

    def add(self, name: str, value: int) -> None:
        if not name:
            raise ValueError("Symbol name must not be empty.")
        self._symbols[name] = value & WORD_MASK

    def resolve(self, name: str) -> Optional[int]:
        """
        名前に対応する値を返します。未定義の場合は None を返します。
        """
        return self._symbols.get(name)

    def as_map(self) -> SymbolMap:
        return dict(self._symbols)

    def __contains__(self, name: str) -> bool:
        return name in self._symbols
