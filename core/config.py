"""
Configuration for fsbridge.

Settings are read from a YAML file, optionally nested under a top-level
``fsbridge`` key. A missing or malformed file yields the defaults.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .logger import AuditLogger


DEFAULT_CONFIG_PATH = "config.yaml"
DEFAULT_LOG_PATH = "data/audit_log.jsonl"
DEFAULT_JSON_INDENT = 2


@dataclass
class FileAccessConfig:
    """Settings used to build a FileAccess instance."""
    home_dir: Optional[str] = None
    json_indent: int = DEFAULT_JSON_INDENT
    audit_enabled: bool = True
    audit_log_path: str = DEFAULT_LOG_PATH

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FileAccessConfig":
        """Build a config from a parsed mapping, ignoring unknown keys."""
        section = data.get("fsbridge", data) or {}
        if not isinstance(section, dict):
            section = {}
        json_section = section.get("json") or {}
        audit_section = section.get("audit") or {}

        home_dir = section.get("home_dir")
        indent = json_section.get("indent", DEFAULT_JSON_INDENT)

        return cls(
            home_dir=str(home_dir) if home_dir else None,
            json_indent=indent if isinstance(indent, int) and indent >= 0 else DEFAULT_JSON_INDENT,
            audit_enabled=bool(audit_section.get("enabled", True)),
            audit_log_path=str(audit_section.get("log_path") or DEFAULT_LOG_PATH),
        )

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> "FileAccessConfig":
        """Load configuration from YAML file."""
        path = Path(config_path)
        if not path.exists():
            return cls()

        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError):
            return cls()

        if not isinstance(data, dict):
            return cls()
        return cls.from_dict(data)

    def create_logger(self) -> Optional[AuditLogger]:
        """Return the audit logger, or None when auditing is disabled."""
        if not self.audit_enabled:
            return None
        return AuditLogger(log_path=self.audit_log_path)

    def build_file_access(self):
        """Wire resolver, logger and JSON settings into a FileAccess."""
        from modules.file_access import FileAccess, PathResolver

        if self.home_dir:
            resolver = PathResolver(home_dir=self.home_dir)
        else:
            resolver = PathResolver.from_environment()

        return FileAccess(
            resolver=resolver,
            logger=self.create_logger(),
            json_indent=self.json_indent,
        )

    def save(self, config_path: str = DEFAULT_CONFIG_PATH) -> None:
        """Save current settings to a YAML file."""
        config = {
            "fsbridge": {
                "home_dir": self.home_dir,
                "json": {"indent": self.json_indent},
                "audit": {
                    "enabled": self.audit_enabled,
                    "log_path": self.audit_log_path,
                },
            }
        }

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(config, f, default_flow_style=False)
