# tests/cli/test_cli.py
"""
コマンドライン解析とエントリポイントの結合テスト。
QCommandLineParser による繰り返しオプションの保持と、main() の終了コードを検証します。
"""
import io

import pytest
import yaml

from mips_sim_cli.cli.main import main
from mips_sim_cli.cli.options import parse_arguments
from mips_sim_cli.common.errors import MalformedValueError
from mips_sim_cli.core.dry_run import DryRunBackend


class TestParseArguments:
    def test_repeatable_options_keep_order(self):
        opts = parse_arguments([
            "mips-sim-cli", "--dump-range", "0,4,a.bin", "--dump-range=8,4,b.bin",
            "--d-cache", "lru,1,1,1", "--d-cache", "lfu,2,2,2", "prog.elf",
        ])
        assert opts.positional == ("prog.elf",)
        assert opts.values_of("dump-range") == ["0,4,a.bin", "8,4,b.bin"]
        assert opts.last("d-cache") == "lfu,2,2,2"

    # @intent:test_case_alias 短縮名（tr-*, d-regs）が正規名に集約されることを検証します。
    def test_aliases_map_to_primary_names(self):
        opts = parse_arguments(["mips-sim-cli", "--tr-gp", "1", "--trace-gp", "2", "--d-regs", "--tr-pc", "x.elf"])
        assert opts.values_of("trace-gp") == ["1", "2"]
        assert opts.is_set("dump-registers")
        assert opts.is_set("trace-pc")
        assert not opts.is_set("trace-hi")

    def test_unknown_option(self):
        with pytest.raises(MalformedValueError):
            parse_arguments(["mips-sim-cli", "--no-such-flag", "x.elf"])

    def test_help_and_version_are_flags(self):
        assert parse_arguments(["mips-sim-cli", "--help"]).is_set("help")
        opts = parse_arguments(["mips-sim-cli", "--version"])
        assert opts.is_set("version")
        assert not opts.is_set("help")

    def test_missing_option_value(self):
        with pytest.raises(MalformedValueError, match="dump-range"):
            parse_arguments(["mips-sim-cli", "x.elf", "--dump-range"])


class TestMain:
    @pytest.fixture
    def elf(self, tmp_path):
        path = tmp_path / "prog.elf"
        path.write_bytes(b"\x7fELF")
        return path

    def run(self, *args):
        out = io.StringIO()
        status = main(["mips-sim-cli", *args], backend=DryRunBackend(out=out))
        return status, out.getvalue()

    def test_dry_run_summary(self, elf, tmp_path):
        words = tmp_path / "words.txt"
        words.write_text("0x11\n0x22\n")
        status, output = self.run(
            "--pipelined", "--d-cache", "4,2,2", "--trace-gp", "*", "--fail-match", "IaOJ",
            "--load-range", f"0x400,{words}", str(elf))

        assert status == 0
        summary = yaml.safe_load(output)
        assert summary["machine"]["data_cache"] == "random,4,2,2,wtna"
        assert summary["trace"]["gp"] == list(range(32))
        assert sorted(summary["report"]["expect_fail"]) == [
            "ALU_UNSUPPORTED", "INSTRUCTION_UNSUPPORTED", "OVERFLOW", "UNALIGNED_JUMP"]
        assert summary["memory"] == {"0x00000400": "0x00000011", "0x00000404": "0x00000022"}

    def test_asm_symbols_in_load_range(self, tmp_path):
        source = tmp_path / "prog.S"
        source.write_text("main:\n  nop\nbuffer: .space 16\n")
        words = tmp_path / "words.txt"
        words.write_text("7\n")
        status, output = self.run("--asm", "--load-range", f"buffer,{words}", str(source))

        assert status == 0
        summary = yaml.safe_load(output)
        assert summary["symbols"] == {"main": "0x80020000", "buffer": "0x80020004"}
        assert summary["memory"] == {"0x80020004": "0x00000007"}

    @pytest.mark.parametrize("args, message", [
        ((), "Single ELF file has to be specified"),
        (("--d-cache", "lru,4,0,2"), "cannot have zero component"),
        (("--i-cache", "mru,4,2,2"), "Policy for instruction cache is incorrect."),
        (("--fail-match", "ix"), "Unknown fail condition: x"),
        (("--trace-gp", "33"), "Unknown register number given for trace-gp: 33"),
        (("--dump-range", "0x10"), "Range start missing"),
        (("--dump-range", "main,64,out.bin"), "Range start/length specification error"),
    ])
    def test_configuration_errors_exit_1(self, elf, capsys, args, message):
        status, output = self.run(*args, *([str(elf)] if args else []))
        assert status == 1
        assert output == ""
        assert message in capsys.readouterr().err

    def test_two_files(self, elf, capsys):
        status, _ = self.run(str(elf), str(elf))
        assert status == 1
        assert "Single ELF file" in capsys.readouterr().err

    def test_assembly_failure_exit_1(self, tmp_path, capsys):
        source = tmp_path / "bad.S"
        source.write_text(".word missing\n")
        status, output = self.run("--asm", str(source))
        assert status == 1
        assert output == ""
        assert "Assembly of" in capsys.readouterr().err

    def test_unknown_option_exit_1(self, elf, capsys):
        status, _ = self.run("--bogus", str(elf))
        assert status == 1
        assert "bogus" in capsys.readouterr().err

    def test_missing_option_value_exit_1(self, elf, capsys):
        status, output = self.run(str(elf), "--load-range")
        assert status == 1
        assert output == ""
        assert "load-range" in capsys.readouterr().err

    def test_version(self, capsys):
        status, _ = self.run("--version")
        assert status == 0
        assert "mips-sim-cli" in capsys.readouterr().out

    def test_help(self, capsys):
        status, _ = self.run("--help")
        assert status == 0
        assert "--fail-match" in capsys.readouterr().out
