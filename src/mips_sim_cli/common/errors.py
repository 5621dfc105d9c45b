"""
設定エラーの型定義。

全ての設定エラーは致命的であり、ライブラリ層では例外として送出され、
CLIのトップレベルで一度だけ終了コードに変換されます。
"""

# @intent:responsibility 設定処理で発生する全ての致命的エラーの基底クラス。
# @intent:rationale 既存コードが ValueError を使用しているため、その派生として定義します。
class ConfigurationError(ValueError):
    exit_status = 1


# @intent:responsibility 指定文字列が文法に合わない場合のエラー（キャッシュ指定、トラップ文字など）。
class MalformedValueError(ConfigurationError):
    pass


# @intent:responsibility シンボル名が未定義、またはシンボルテーブルが存在しない場合のエラー。
class ResolutionError(ConfigurationError):
    pass


# @intent:responsibility 位置引数の個数やキャッシュ構成のゼロ値など、構造上の制約違反。
class StructuralError(ConfigurationError):
    pass


# @intent:responsibility 外部アセンブラから委譲された失敗。
class AssemblyError(ConfigurationError):
    pass
