"""Configuration schema for forge."""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Literal, cast

MissingScriptPolicy = Literal["skip", "fail"]


def _argv(value: Any) -> tuple[str, ...] | None:
    """Coerce a YAML value into a command argv tuple."""
    if value is None:
        return None
    if isinstance(value, str):
        parts = tuple(value.split())
    elif isinstance(value, (list, tuple)):
        parts = tuple(str(v) for v in value)
    else:
        return None
    return parts or None


@dataclass
class ForgeConfig:
    """Forge configuration schema.

    None values indicate "not set" and are filled from a lower layer
    (built-in defaults < global < local < command line).
    """

    # Manifest commands; the module path is appended to manifest_init
    manifest_init: tuple[str, ...] | None = None
    manifest_tidy: tuple[str, ...] | None = None

    # Dependency setup script
    setup_script: str | None = None
    setup_shell: str | None = None
    missing_setup_script: MissingScriptPolicy | None = None

    # Git settings
    default_branch: str | None = None
    commit_message: str | None = None
    git_author_name: str | None = None
    git_author_email: str | None = None

    # Seconds per external command; 0 disables the limit
    tool_timeout: float | None = None

    # Delete the partially created project when a step fails
    rollback: bool | None = None

    def merge(self, other: ForgeConfig) -> ForgeConfig:
        """Merge another config into this one.

        Values from `other` take precedence when they are not None.
        Returns a new ForgeConfig instance.
        """
        merged: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(other, f.name)
            merged[f.name] = value if value is not None else getattr(self, f.name)
        return ForgeConfig(**merged)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary, excluding None values."""
        result: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            result[f.name] = list(value) if isinstance(value, tuple) else value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ForgeConfig:
        """Create a ForgeConfig from a dictionary.

        Unknown keys are ignored. Values are coerced to the field types.
        """
        policy_raw = data.get("missing_setup_script")
        policy: MissingScriptPolicy | None = None
        if policy_raw in ("skip", "fail"):
            policy = cast(MissingScriptPolicy, policy_raw)

        timeout_raw = data.get("tool_timeout")
        tool_timeout = float(timeout_raw) if timeout_raw is not None else None

        rollback_raw = data.get("rollback")
        rollback = bool(rollback_raw) if rollback_raw is not None else None

        def _str(key: str) -> str | None:
            value = data.get(key)
            return str(value) if value is not None else None

        return cls(
            manifest_init=_argv(data.get("manifest_init")),
            manifest_tidy=_argv(data.get("manifest_tidy")),
            setup_script=_str("setup_script"),
            setup_shell=_str("setup_shell"),
            missing_setup_script=policy,
            default_branch=_str("default_branch"),
            commit_message=_str("commit_message"),
            git_author_name=_str("git_author_name"),
            git_author_email=_str("git_author_email"),
            tool_timeout=tool_timeout,
            rollback=rollback,
        )

    @property
    def timeout(self) -> float | None:
        """Effective per-command timeout, None when unbounded."""
        if not self.tool_timeout or self.tool_timeout <= 0:
            return None
        return self.tool_timeout


# Default configuration values (used when not specified anywhere)
DEFAULT_CONFIG = ForgeConfig(
    manifest_init=("go", "mod", "init"),
    manifest_tidy=("go", "mod", "tidy"),
    setup_script="_deps.sh",
    setup_shell="sh",
    missing_setup_script="skip",
    default_branch="main",
    commit_message="created by forge: initial commit",
    tool_timeout=600.0,
    rollback=True,
)
