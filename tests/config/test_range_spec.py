# tests/config/test_range_spec.py
"""
mips_sim_cli.config.range_specモジュールの単体テスト。
"""
import pytest

from mips_sim_cli.common.errors import MalformedValueError, ResolutionError
from mips_sim_cli.common.types import SymbolTable
from mips_sim_cli.config.models import DumpRange, LoadRange
from mips_sim_cli.config.range_spec import parse_dump_range, parse_load_range

# @intent:test_suite --dump-range / --load-range 指定の解析検証。

@pytest.fixture
def symtab():
    return SymbolTable({"main": 0x80020000, "size": 0x40})


class TestParseDumpRange:
    def test_numeric(self):
        assert parse_dump_range("0x1000,256,dump.bin", None) == DumpRange(4096, 256, "dump.bin")

    def test_symbolic_start(self, symtab):
        dump = parse_dump_range("main,64,out.bin", symtab)
        assert dump.start == 0x80020000
        assert dump.length == 64

    def test_symbolic_length(self, symtab):
        assert parse_dump_range("0,size,out.bin", symtab).length == 0x40

    def test_symbol_without_table(self):
        with pytest.raises(ResolutionError, match="Range start/length specification error"):
            parse_dump_range("main,64,out.bin", None)

    # @intent:test_case_filename ファイル名は先頭2つのカンマ以降をそのまま使用することを検証します。
    def test_filename_may_contain_commas(self):
        assert parse_dump_range("0,4,a,b,c.bin", None).filename == "a,b,c.bin"

    def test_empty_filename_is_kept(self):
        assert parse_dump_range("0,4,", None).filename == ""

    def test_missing_start(self):
        with pytest.raises(MalformedValueError, match="Range start missing"):
            parse_dump_range("0x1000", None)

    def test_missing_length(self):
        with pytest.raises(MalformedValueError, match="Range length/name missing"):
            parse_dump_range("0x1000,dump.bin", None)

    def test_bad_length(self):
        with pytest.raises(ResolutionError):
            parse_dump_range("0x1000,12z,dump.bin", None)


class TestParseLoadRange:
    def test_numeric(self):
        assert parse_load_range("0x2000,words.txt", None) == LoadRange(0x2000, "words.txt")

    def test_symbolic(self, symtab):
        assert parse_load_range("main,words.txt", symtab).start == 0x80020000

    def test_filename_may_contain_commas(self):
        assert parse_load_range("16,a,b.txt", None).filename == "a,b.txt"

    def test_missing_comma(self):
        with pytest.raises(MalformedValueError, match="Range start missing"):
            parse_load_range("words.txt", None)

    def test_unknown_symbol(self, symtab):
        with pytest.raises(ResolutionError):
            parse_load_range("nowhere,words.txt", symtab)
