# mips_sim_cli/config/values.py
"""
数値・シンボル解決モジュール。

C言語の strtoul(..., 0) と同じ基数自動判定で整数を解析し、
数値でないトークンはシンボルテーブルから解決します。
"""
import re
from typing import Optional

from mips_sim_cli.common.errors import ResolutionError
from mips_sim_cli.common.types import SymbolTable, WORD_MASK

_HEX_RE = re.compile(r"0[xX][0-9a-fA-F]+")
_OCT_RE = re.compile(r"0[0-7]*")
_DEC_RE = re.compile(r"[1-9][0-9]*")

RANGE_SPEC_ERROR = "Range start/length specification error."


# @intent:utility_function 0x/0X は16進、先頭0は8進、それ以外は10進として文字列全体を解析します。
# @intent:pre-condition 前後の空白や符号は受け付けません。文字列全体が数値でなければ ValueError。
def parse_c_integer(text: str, limit: Optional[int] = WORD_MASK) -> int:
    if _HEX_RE.fullmatch(text):
        value = int(text[2:], 16)
    elif _OCT_RE.fullmatch(text):
        value = int(text, 8)
    elif _DEC_RE.fullmatch(text):
        value = int(text, 10)
    else:
        raise ValueError(f"Invalid integer format: {text!r}")
    if limit is not None and value > limit:
        raise ValueError(f"Integer {text} exceeds {limit:#x}")
    return value


# @intent:responsibility 範囲指定のトークンを32bit値に解決します。
# @intent:rationale 空文字列または数字で始まるトークンは数値として、それ以外はシンボルとして扱います。
def resolve_value(token: str, symtab: Optional[SymbolTable]) -> int:
    """
    トークンを数値またはシンボルとして解決し、32bit値を返します。
    解決できない場合は ResolutionError を送出します。
    """
    if not token or token[0].isdigit():
        try:
            return parse_c_integer(token)
        except ValueError:
            raise ResolutionError(f"{RANGE_SPEC_ERROR} Cannot parse number {token!r}.") from None

    if symtab is None:
        raise ResolutionError(f"{RANGE_SPEC_ERROR} No symbol table available to resolve {token!r}.")
    value = symtab.resolve(token)
    if value is None:
        raise ResolutionError(f"{RANGE_SPEC_ERROR} Unknown symbol {token!r}.")
    return value & WORD_MASK
