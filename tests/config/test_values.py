# tests/config/test_values.py
"""
mips_sim_cli.config.valuesモジュールの単体テスト。
"""
import pytest

from mips_sim_cli.common.errors import ResolutionError
from mips_sim_cli.common.types import SymbolTable
from mips_sim_cli.config.values import parse_c_integer, resolve_value

# @intent:test_suite 基数自動判定の整数解析とシンボル解決の検証。

class TestParseCInteger:
    @pytest.mark.parametrize("text, expected", [
        ("0", 0),
        ("42", 42),
        ("0x1000", 0x1000),
        ("0XfF", 0xFF),
        ("010", 8),
        ("4294967295", 0xFFFFFFFF),
    ])
    def test_auto_base(self, text, expected):
        assert parse_c_integer(text) == expected

    @pytest.mark.parametrize("text", ["", "08", "0x", "12abc", " 12", "-1", "+1", "1_000", "4294967296"])
    def test_rejects_partial_or_out_of_range(self, text):
        with pytest.raises(ValueError):
            parse_c_integer(text)

    def test_limit_can_be_lifted(self):
        assert parse_c_integer("0x100000000", limit=None) == 0x100000000


class TestResolveValue:
    @pytest.fixture
    def symtab(self):
        return SymbolTable({"main": 0x80020000, "buffer": 0x1000})

    def test_numeric_token_ignores_symbol_table(self, symtab):
        assert resolve_value("0x1000", symtab) == 0x1000
        assert resolve_value("256", None) == 256

    def test_symbol_lookup(self, symtab):
        assert resolve_value("main", symtab) == 0x80020000

    # @intent:test_case_unknown_symbol 未定義シンボルは解決エラーになることを検証します。
    def test_unknown_symbol(self, symtab):
        with pytest.raises(ResolutionError, match="Unknown symbol 'missing'"):
            resolve_value("missing", symtab)

    def test_symbol_without_table(self):
        with pytest.raises(ResolutionError, match="Range start/length specification error"):
            resolve_value("main", None)

    def test_empty_token_is_an_error(self, symtab):
        with pytest.raises(ResolutionError):
            resolve_value("", symtab)

    def test_digit_prefixed_token_is_never_a_symbol(self):
        symtab = SymbolTable({"1abc": 5})
        with pytest.raises(ResolutionError):
            resolve_value("1abc", symtab)
