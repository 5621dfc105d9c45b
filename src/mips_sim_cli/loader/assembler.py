# mips_sim_cli/loader/assembler.py
"""
ドライラン用のシンボル抽出アセンブラ。

命令のエンコードは行わず、2パス方式でラベルと .equ/.set のシンボルを収集し、
.word のデータのみをメモリに書き込みます。命令は1つあたり4バイトとして配置を進めます。
"""
import re
import sys
from typing import List, Optional, Tuple

from mips_sim_cli.common.types import SymbolTable, WORD_MASK
from mips_sim_cli.config.values import parse_c_integer
from mips_sim_cli.core.machine import AbstractAssembler
from mips_sim_cli.transport.memory import MemoryAccess

DEFAULT_BASE_ADDRESS = 0x80020000

_IGNORED_DIRECTIVES = {".text", ".data", ".globl", ".global", ".ent", ".end", ".align", ".section"}
_LABEL_RE = re.compile(r"^([A-Za-z_.$][A-Za-z0-9_.$]*)\s*:")


class AssemblerSyntaxError(ValueError):
    def __init__(self, line_num: int, message: str):
        super().__init__(message)
        self.line_num = line_num


# @intent:responsibility アセンブラソースからシンボルテーブルを構築します。
class LabelScanAssembler(AbstractAssembler):
    def __init__(self, symtab: SymbolTable, memory: MemoryAccess, base_address: int = DEFAULT_BASE_ADDRESS):
        self._symtab = symtab
        self._memory = memory
        self._base_address = base_address

    def assemble(self, filename: str) -> bool:
        try:
            with open(filename, 'r', encoding="utf-8") as f:
                lines = f.readlines()
        except OSError as e:
            print(f"{filename}: error: cannot open file: {e.strerror}", file=sys.stderr)
            return False
        except UnicodeDecodeError:
            print(f"{filename}: error: not UTF-8 text", file=sys.stderr)
            return False

        try:
            parsed_lines = [self._parse_line(line) for line in lines]
            self._collect_symbols(parsed_lines)
            self._emit_data(parsed_lines)
        except AssemblerSyntaxError as e:
            print(f"{filename}:{e.line_num}: error: {e}", file=sys.stderr)
            return False
        return True

    # @intent:utility_function 1行をラベル、ニーモニック（ディレクティブ）、オペランドに分解します。
    def _parse_line(self, line: str) -> Tuple[List[str], Optional[str], str]:
        line = re.split(r"#|//|;", line, maxsplit=1)[0].strip()
        labels = []
        while True:
            match = _LABEL_RE.match(line)
            if not match:
                break
            labels.append(match.group(1))
            line = line[match.end():].strip()

        if not line:
            return labels, None, ""

        parts = re.split(r'\s+', line, maxsplit=1)
        mnemonic = parts[0].lower()
        operands = parts[1] if len(parts) > 1 else ""
        return labels, mnemonic, operands

    def _parse_val(self, val_str: str, line_num: int) -> int:
        val_str = val_str.strip()
        negative = val_str.startswith('-')
        if negative:
            val_str = val_str[1:].strip()
        try:
            value = parse_c_integer(val_str, limit=None)
        except ValueError:
            value = self._symtab.resolve(val_str)
            if value is None:
                raise AssemblerSyntaxError(line_num, f"undefined symbol or invalid value: {val_str}")
        return (-value if negative else value) & WORD_MASK

    # First pass: symbol addresses only
    def _collect_symbols(self, parsed_lines) -> None:
        pc = self._base_address
        for line_num, (labels, mnemonic, operands) in enumerate(parsed_lines, 1):
            for label in labels:
                if label in self._symtab:
                    raise AssemblerSyntaxError(line_num, f"duplicate symbol {label}")
                self._symtab.add(label, pc)
            if mnemonic is None or mnemonic in _IGNORED_DIRECTIVES:
                continue

            if mnemonic == ".org":
                pc = self._parse_val(operands, line_num)
            elif mnemonic in (".equ", ".set"):
                name, _, value = operands.partition(",")
                if not value:
                    # ".set noreorder" and friends
                    continue
                name = name.strip()
                if not name:
                    raise AssemblerSyntaxError(line_num, "missing symbol name")
                if name in self._symtab:
                    raise AssemblerSyntaxError(line_num, f"duplicate symbol {name}")
                self._symtab.add(name, self._parse_val(value, line_num))
            elif mnemonic == ".word":
                pc += 4 * len(operands.split(','))
            elif mnemonic == ".space":
                pc += self._parse_val(operands, line_num)
            elif mnemonic.startswith('.'):
                raise AssemblerSyntaxError(line_num, f"unsupported directive {mnemonic}")
            else:
                pc += 4
            pc &= WORD_MASK

    # Second pass: .word data
    def _emit_data(self, parsed_lines) -> None:
        pc = self._base_address
        for line_num, (_, mnemonic, operands) in enumerate(parsed_lines, 1):
            if mnemonic is None or mnemonic in _IGNORED_DIRECTIVES or mnemonic in (".equ", ".set"):
                continue
            if mnemonic == ".org":
                pc = self._parse_val(operands, line_num)
            elif mnemonic == ".word":
                for val_str in operands.split(','):
                    if pc & 3:
                        raise AssemblerSyntaxError(line_num, f".word at unaligned address {pc:#010x}")
                    self._memory.write_word(pc, self._parse_val(val_str, line_num))
                    pc = (pc + 4) & WORD_MASK
            elif mnemonic == ".space":
                pc = (pc + self._parse_val(operands, line_num)) & WORD_MASK
            else:
                pc = (pc + 4) & WORD_MASK
