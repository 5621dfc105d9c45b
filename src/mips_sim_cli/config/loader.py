import yaml
from typing import Dict, Any
from mips_sim_cli.common.errors import MalformedValueError, StructuralError
from mips_sim_cli.config.cache_spec import REPLACEMENT_POLICIES, WRITE_POLICIES, parse_cache_spec
from mips_sim_cli.config.models import CacheConfig, MachineConfig
from mips_sim_cli.config.values import parse_c_integer

_TOP_LEVEL_KEYS = {"pipelined", "delay_slot", "memory", "data_cache", "instruction_cache"}
_MEMORY_KEYS = {"read_time", "write_time", "burst_time"}
_CACHE_KEYS = {"policy", "sets", "blocks", "associativity", "write_policy"}

# @intent:responsibility YAMLのマシンプリセットを読み込み、コマンドラインの既定値となるMachineConfigを生成します。
class PresetLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        try:
            with open(path, 'r', encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except OSError as e:
            raise MalformedValueError(f"Cannot read preset {path}: {e.strerror}") from None
        except UnicodeDecodeError:
            raise MalformedValueError(f"Invalid YAML in preset {path}: not UTF-8 text") from None
        except yaml.YAMLError as e:
            raise MalformedValueError(f"Invalid YAML in preset {path}: {e}") from None
        return self._parse_config(data if data is not None else {})

    def _parse_config(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise MalformedValueError("Preset must be a mapping.")
        self._check_keys(data, _TOP_LEVEL_KEYS, "preset")

        memory = data.get("memory", {}) or {}
        if not isinstance(memory, dict):
            raise MalformedValueError("Preset 'memory' must be a mapping.")
        self._check_keys(memory, _MEMORY_KEYS, "memory")

        defaults = MachineConfig(elf="")
        return MachineConfig(
            elf="",
            pipelined=self._parse_bool(data.get("pipelined", defaults.pipelined), "pipelined"),
            delay_slot=self._parse_bool(data.get("delay_slot", defaults.delay_slot), "delay_slot"),
            read_time=self._parse_int(memory.get("read_time", defaults.read_time)),
            write_time=self._parse_int(memory.get("write_time", defaults.write_time)),
            burst_time=self._parse_int(memory.get("burst_time", defaults.burst_time)),
            data_cache=self._parse_cache(data.get("data_cache"), "data"),
            instruction_cache=self._parse_cache(data.get("instruction_cache"), "instruction"),
        )

    # @intent:rationale キャッシュはコマンドラインと同じ指定文字列、または各項目のマッピングで記述できます。
    def _parse_cache(self, value: Any, label: str) -> CacheConfig:
        if value is None or value is False:
            return CacheConfig()
        if isinstance(value, str):
            return parse_cache_spec(value, label)
        if not isinstance(value, dict):
            raise MalformedValueError(f"Preset {label} cache must be a string or a mapping.")
        self._check_keys(value, _CACHE_KEYS, f"{label} cache")

        defaults = CacheConfig()
        policy = defaults.replacement_policy
        if "policy" in value:
            policy = REPLACEMENT_POLICIES.get(str(value["policy"]).lower())
            if policy is None:
                raise MalformedValueError(f"Policy for {label} cache is incorrect.")
        write_policy = defaults.write_policy
        if "write_policy" in value:
            write_policy = WRITE_POLICIES.get(str(value["write_policy"]).lower())
            if write_policy is None:
                raise MalformedValueError(
                    f"Write policy for {label} cache is incorrect (correct wb/wt/wtna/wta).")

        sets = self._parse_int(value.get("sets", defaults.sets))
        blocks = self._parse_int(value.get("blocks", defaults.blocks))
        associativity = self._parse_int(value.get("associativity", defaults.associativity))
        if sets == 0 or blocks == 0 or associativity == 0:
            raise StructuralError(f"Parameters for {label} cache cannot have zero component.")

        return CacheConfig(
            enabled=True,
            replacement_policy=policy,
            write_policy=write_policy,
            sets=sets,
            blocks=blocks,
            associativity=associativity,
        )

    def _check_keys(self, data: Dict[str, Any], allowed, where: str) -> None:
        unknown = sorted(str(k) for k in data if k not in allowed)
        if unknown:
            raise MalformedValueError(f"Unknown key(s) in {where}: {', '.join(unknown)}")

    def _parse_bool(self, value: Any, name: str) -> bool:
        if isinstance(value, bool):
            return value
        raise MalformedValueError(f"Preset value for {name} must be true or false: {value!r}")

    def _parse_int(self, value: Any) -> int:
        if isinstance(value, bool):
            raise MalformedValueError(f"Invalid integer format: {value}")
        if isinstance(value, int):
            if value < 0:
                raise MalformedValueError(f"Invalid integer format: {value}")
            return value
        if isinstance(value, str):
            try:
                return parse_c_integer(value)
            except ValueError:
                raise MalformedValueError(f"Invalid integer format: {value}") from None
        raise MalformedValueError(f"Invalid integer format: {value}")
