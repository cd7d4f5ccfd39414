"""
Configuration system for Field Reorder
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

GLOBAL_CONFIG_PATH = Path.home() / ".field-reorder" / "config.yaml"
PROJECT_CONFIG_NAME = ".field-reorder.yaml"

_TRUTHY = ["true", "1", "yes"]


@dataclass
class ReorderConfig:
    """Configuration for reorder operations"""

    encoding: str = "utf-8"
    file_extensions: list[str] = field(default_factory=lambda: [".rs"])
    diff_context: int = 3  # Context lines in dry-run previews


@dataclass
class BackupConfig:
    """Configuration for backup operations"""

    enabled: bool = True
    directory: str = ".backups"
    compression: bool = True
    keep_sessions: int = 10


@dataclass
class Config:
    """Main configuration class for Field Reorder"""

    # General settings
    dry_run: bool = False
    verbose: bool = False
    quiet: bool = False

    # Sub-configurations
    reorder: ReorderConfig = field(default_factory=ReorderConfig)
    backup: BackupConfig = field(default_factory=BackupConfig)

    @classmethod
    def from_file(cls, filepath: Path) -> "Config":
        """Load configuration from YAML or JSON file"""
        if not filepath.exists():
            logger.warning(f"Config file not found: {filepath}")
            return cls()

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                if filepath.suffix in [".yaml", ".yml"]:
                    data = yaml.safe_load(f)
                elif filepath.suffix == ".json":
                    data = json.load(f)
                else:
                    logger.error(f"Unsupported config file format: {filepath.suffix}")
                    return cls()

            return cls._from_dict(data or {})
        except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
            logger.error(f"Error loading config file: {e}")
            return cls()

    @classmethod
    def _from_dict(cls, data: dict[str, Any]) -> "Config":
        """Create Config instance from dictionary"""
        config = cls()

        for key in ["dry_run", "verbose", "quiet"]:
            if key in data:
                setattr(config, key, data[key])

        if "reorder" in data:
            config.reorder = ReorderConfig(**data["reorder"])
        if "backup" in data:
            config.backup = BackupConfig(**data["backup"])

        return config

    @classmethod
    def load_hierarchy(cls, project_dir: Path | None = None) -> "Config":
        """Load configuration from hierarchy: global -> project -> env vars"""
        config = cls()

        # 1. Load global config
        if GLOBAL_CONFIG_PATH.exists():
            config = cls.from_file(GLOBAL_CONFIG_PATH)
            logger.debug(f"Loaded global config from {GLOBAL_CONFIG_PATH}")

        # 2. Load project config
        if project_dir:
            project_config = project_dir / PROJECT_CONFIG_NAME
            if project_config.exists():
                config.merge(cls.from_file(project_config))
                logger.debug(f"Loaded project config from {project_config}")

        # 3. Apply environment variables
        config.apply_env_vars()

        return config

    def merge(self, other: "Config") -> None:
        """Merge another config into this one (other takes precedence)"""
        # Boolean flags are only merged when explicitly set
        for flag in ["dry_run", "verbose", "quiet"]:
            if getattr(other, flag):
                setattr(self, flag, True)

        self._merge_dataclass(self.reorder, other.reorder)
        self._merge_dataclass(self.backup, other.backup)

    def _merge_dataclass(self, target: Any, source: Any) -> None:
        """Merge non-default values of source dataclass into target"""
        defaults = source.__class__()
        for field_name in source.__dataclass_fields__:
            source_value = getattr(source, field_name)
            if source_value != getattr(defaults, field_name):
                setattr(target, field_name, source_value)

    def apply_env_vars(self) -> None:
        """Apply environment variables to configuration"""
        # FIELD_REORDER_DRY_RUN
        if os.environ.get("FIELD_REORDER_DRY_RUN", "").lower() in _TRUTHY:
            self.dry_run = True

        # FIELD_REORDER_VERBOSE
        if os.environ.get("FIELD_REORDER_VERBOSE", "").lower() in _TRUTHY:
            self.verbose = True

        # FIELD_REORDER_ENCODING
        if encoding := os.environ.get("FIELD_REORDER_ENCODING"):
            self.reorder.encoding = encoding

    def validate(self) -> list[str]:
        """Validate configuration and return list of errors"""
        errors = []

        if self.verbose and self.quiet:
            errors.append("verbose and quiet cannot both be enabled")

        try:
            "".encode(self.reorder.encoding)
        except LookupError:
            errors.append(f"Unknown encoding: {self.reorder.encoding}")

        for extension in self.reorder.file_extensions:
            if not extension.startswith("."):
                errors.append(f"File extension must start with '.': {extension}")

        if self.reorder.diff_context < 0:
            errors.append("Diff context must be zero or greater")

        if self.backup.keep_sessions < 1:
            errors.append("Backup keep_sessions must be at least 1")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary"""
        return {
            "dry_run": self.dry_run,
            "verbose": self.verbose,
            "quiet": self.quiet,
            "reorder": asdict(self.reorder),
            "backup": asdict(self.backup),
        }

    def save(self, filepath: Path) -> None:
        """Save configuration to file"""
        data = self.to_dict()

        if filepath.suffix not in [".yaml", ".yml", ".json"]:
            raise ValueError(f"Unsupported config file format: {filepath.suffix}")

        with open(filepath, "w", encoding="utf-8") as f:
            if filepath.suffix == ".json":
                json.dump(data, f, indent=2)
            else:
                yaml.safe_dump(data, f, default_flow_style=False)
