# mips_sim_cli/loader/loader.py
"""
メモリ範囲ローダーモジュール。
1行に1つの整数を記述したテキストファイルを、指定アドレスから順にワードとして書き込みます。
"""
from mips_sim_cli.common.errors import MalformedValueError, StructuralError
from mips_sim_cli.common.types import WORD_MASK
from mips_sim_cli.config.values import parse_c_integer
from mips_sim_cli.transport.memory import MemoryAccess

_TRIM_CHARS = " \t\r\n"


class RangeLoader:
    """
    --load-range で指定されたファイルをメモリにロードするローダー。
    """
    # @intent:responsibility ファイルの各行を32bitワードとして start (4バイト境界に切り下げ) から書き込みます。
    # @intent:post-condition 解析できない行に到達した場合、それより前の行は書き込み済みのまま例外を送出します。
    def load(self, memory: MemoryAccess, start: int, filename: str) -> int:
        address = start & ~3
        written = 0

        try:
            f = open(filename, 'r', encoding="utf-8")
        except OSError as e:
            raise StructuralError(f"Cannot open load range file {filename}: {e.strerror}") from None

        line_num = 0
        with f:
            try:
                for line_num, line in enumerate(f, 1):
                    line = line.strip(_TRIM_CHARS)
                    if not line:
                        continue
                    try:
                        value = parse_c_integer(line)
                    except ValueError:
                        raise MalformedValueError(
                            f"Cannot parse load range data on line {line_num} of {filename}: {line}") from None
                    memory.write_word(address, value)
                    address = (address + 4) & WORD_MASK
                    written += 1
            except UnicodeDecodeError:
                raise MalformedValueError(
                    f"Cannot parse load range data after line {line_num} of {filename}: not UTF-8 text") from None

        return written
