"""Configuration system for wpoverflow.
Supports TOML configuration files with project-level and user-level settings.
"""
from __future__ import annotations
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from wpoverflow.analysis.arithmetic_safety import CaseSplit, DivisionForm
from wpoverflow.analysis.overflow import EncodingOptions
from wpoverflow.core.exceptions import ConfigError
from wpoverflow.core.solver import FormulaSolver
from wpoverflow.logging import LogLevel, OverflowLogger, configure_logging, get_logger
CONFIG_FILES = [
    "wpoverflow.toml",
    ".wpoverflow.toml",
    "pyproject.toml",
]
@dataclass
class EncodingConfig:
    """Shape of the synthesized formulas."""
    case_split: str = CaseSplit.FULL.value
    division_form: str = DivisionForm.COLLAPSED.value
    def to_options(self) -> EncodingOptions:
        """Convert to the dispatcher's EncodingOptions."""
        return EncodingOptions(
            case_split=_choice(CaseSplit, self.case_split, "encoding.case_split"),
            division_form=_choice(DivisionForm, self.division_form, "encoding.division_form"),
        )
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "case_split": self.case_split,
            "division_form": self.division_form,
        }
@dataclass
class SolverConfig:
    """Configuration for the z3 backend."""
    timeout_ms: int = 10000
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"timeout_ms": self.timeout_ms}
@dataclass
class LoggingConfig:
    """Configuration for the package logger."""
    level: str = "normal"
    color: bool = True
    def to_level(self) -> LogLevel:
        try:
            return LogLevel.from_name(self.level)
        except ValueError as e:
            raise ConfigError(str(e), hint="use quiet, normal, verbose, debug or trace") from None
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {"level": self.level, "color": self.color}
@dataclass
class WpOverflowConfig:
    """Main configuration for wpoverflow."""
    encoding: EncodingConfig = field(default_factory=EncodingConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    project_root: Path | None = None
    config_file: Path | None = None
    def encoding_options(self) -> EncodingOptions:
        return self.encoding.to_options()
    def make_solver(self) -> FormulaSolver:
        return FormulaSolver(timeout_ms=self.solver.timeout_ms)
    def configure(self) -> OverflowLogger:
        """Apply the logging section to the global logger."""
        return configure_logging(level=self.logging.to_level(), color=self.logging.color)
    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "encoding": self.encoding.to_dict(),
            "solver": self.solver.to_dict(),
            "logging": self.logging.to_dict(),
        }
    def to_toml(self) -> str:
        """Generate TOML configuration string."""
        lines = ["[tool.wpoverflow]"]
        for section, values in self.to_dict().items():
            lines.append("")
            lines.append(f"[tool.wpoverflow.{section}]")
            for key, value in values.items():
                if isinstance(value, bool):
                    lines.append(f"{key} = {str(value).lower()}")
                elif isinstance(value, str):
                    lines.append(f'{key} = "{value}"')
                else:
                    lines.append(f"{key} = {value}")
        return "\n".join(lines) + "\n"
def _choice(enum_type, value: str, key: str):
    try:
        return enum_type(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_type)
        raise ConfigError(f"invalid value {value!r} for {key}", hint=f"use one of {allowed}") from None
def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Find configuration file by walking up directory tree."""
    if start_dir is None:
        start_dir = Path.cwd()
    current = start_dir.resolve()
    while current != current.parent:
        for config_name in CONFIG_FILES:
            config_path = current / config_name
            if config_path.exists() and _claims_config(config_path):
                return config_path
        current = current.parent
    home = Path.home()
    for config_name in [".wpoverflow.toml", "wpoverflow.toml"]:
        config_path = home / config_name
        if config_path.exists():
            return config_path
    return None
def _claims_config(path: Path) -> bool:
    """A pyproject.toml only counts when it has a [tool.wpoverflow] table."""
    if path.name != "pyproject.toml":
        return True
    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError):
        return False
    return "wpoverflow" in data.get("tool", {})
def load_config(
    config_path: Path | None = None,
    start_dir: Path | None = None,
) -> WpOverflowConfig:
    """Load configuration from file or use defaults.
    Args:
        config_path: Explicit path to config file
        start_dir: Directory to start searching for config
    Returns:
        Loaded configuration
    Raises:
        ConfigError: if an enumerated setting has an unknown value
    """
    config = WpOverflowConfig()
    if config_path is None:
        config_path = find_config_file(start_dir)
    if config_path is None or not config_path.exists():
        return config
    config.config_file = config_path
    config.project_root = config_path.parent
    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        get_logger().warning(f"Failed to parse config file {config_path}: {e}")
        return config
    if config_path.name == "pyproject.toml":
        section = data.get("tool", {}).get("wpoverflow", {})
    else:
        section = data.get("tool", {}).get("wpoverflow", data)
    _apply_config(config, section)
    return config
def _apply_config(config: WpOverflowConfig, data: dict[str, Any]) -> None:
    """Apply configuration data to config object."""
    if "encoding" in data:
        enc_data = data["encoding"]
        for key in ["case_split", "division_form"]:
            if key in enc_data:
                setattr(config.encoding, key, str(enc_data[key]))
        config.encoding.to_options()
    if "solver" in data:
        if "timeout_ms" in data["solver"]:
            config.solver.timeout_ms = int(data["solver"]["timeout_ms"])
    if "logging" in data:
        log_data = data["logging"]
        if "level" in log_data:
            config.logging.level = str(log_data["level"])
            config.logging.to_level()
        if "color" in log_data:
            config.logging.color = bool(log_data["color"])
def generate_default_config() -> str:
    """Generate default configuration file content."""
    return WpOverflowConfig().to_toml()
def init_config(directory: Path | None = None) -> Path:
    """Initialize a new configuration file in the given directory.
    Args:
        directory: Directory to create config in (default: current)
    Returns:
        Path to created config file
    """
    if directory is None:
        directory = Path.cwd()
    config_path = directory / "wpoverflow.toml"
    if config_path.exists():
        raise FileExistsError(f"Config file already exists: {config_path}")
    config_path.write_text(generate_default_config(), encoding="utf-8")
    return config_path
__all__ = [
    "WpOverflowConfig",
    "EncodingConfig",
    "SolverConfig",
    "LoggingConfig",
    "load_config",
    "find_config_file",
    "generate_default_config",
    "init_config",
]
