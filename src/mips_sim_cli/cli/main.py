# src/mips_sim_cli/cli/main.py
"""
CLIアプリケーションのエントリポイント。
コマンドラインを解析し、構成をバックエンドに適用して実行します。
"""
import sys
from typing import Optional, Sequence

from mips_sim_cli.cli.options import APPLICATION_NAME, APPLICATION_VERSION, help_text, parse_arguments
from mips_sim_cli.common.errors import ConfigurationError
from mips_sim_cli.config.builder import ConfigurationBuilder
from mips_sim_cli.core.dry_run import DryRunBackend
from mips_sim_cli.core.machine import SimulatorBackend

# @intent:responsibility 設定エラーを1行の診断メッセージと終了コード1に変換する唯一の場所です。
def main(argv: Optional[Sequence[str]] = None, backend: Optional[SimulatorBackend] = None) -> int:
    """
    アプリケーションのメイン関数。backend を省略した場合はドライラン・バックエンドを使用します。
    """
    try:
        options = parse_arguments(sys.argv if argv is None else argv)
        if options.is_set("help"):
            print(help_text())
            return 0
        if options.is_set("version"):
            print(f"{APPLICATION_NAME} {APPLICATION_VERSION}")
            return 0
        builder = ConfigurationBuilder(options, backend if backend is not None else DryRunBackend())
        return builder.run()
    except ConfigurationError as e:
        print(e, file=sys.stderr)
        return e.exit_status

if __name__ == '__main__':
    sys.exit(main())
