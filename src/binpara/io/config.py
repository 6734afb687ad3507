"""
Configuration for the binpara.io module.

Defines IoSettings, a frozen dataclass carrying runtime configuration for reading and
writing paragraph files and for the CLI's logging.

Precedence
- Environment (BINPARA_IO_*) > TOML (./binpara.toml or [tool.binpara.io] in
  ./pyproject.toml) > defaults.

Import DAG discipline
- Depends only on stdlib.
- Does not import binpara.core or binpara.cli.

Notes
- fail_fast=False makes the reader report every bad paragraph of a file at once.
- The serializer's round-trip self-check is not configurable.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any

try:  # Python 3.11+ stdlib TOML parser
    import tomllib  # type: ignore
except Exception:  # pragma: no cover - environments without tomllib
    tomllib = None  # type: ignore[assignment]

from .errors import IoConfigError

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class IoSettings:
    """
    Runtime settings for the binpara.io layer.

    Attributes:
        encoding (str): Text encoding of paragraph files.
        fail_fast (bool): Stop reading a file at the first bad paragraph.
        fsync (bool): fsync the temporary file before the atomic rename on write.
        log_level (str): Log level name the CLI configures ("DEBUG" ... "CRITICAL").

    Examples:
        >>> from binpara.io import IoSettings
        >>> IoSettings(fail_fast=True)  # doctest: +ELLIPSIS
        IoSettings(...)
    """

    encoding: str = "utf-8"
    fail_fast: bool = False
    fsync: bool = True
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.log_level not in _LOG_LEVELS:
            raise IoConfigError(f"log_level must be one of {_LOG_LEVELS}, got {self.log_level!r}")

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: IoSettings, cfg: dict[str, Any] | None) -> IoSettings:
        """Apply a loose config mapping onto IoSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _bool(v: Any) -> bool:
            if isinstance(v, bool):
                return v
            if isinstance(v, (int, float)):
                return bool(v)
            if isinstance(v, str):
                return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
            return False

        if "encoding" in cfg and isinstance(cfg["encoding"], str):
            s = replace(s, encoding=cfg["encoding"].strip())

        if "fail_fast" in cfg:
            s = replace(s, fail_fast=_bool(cfg["fail_fast"]))

        if "fsync" in cfg:
            s = replace(s, fsync=_bool(cfg["fsync"]))

        if "log_level" in cfg and isinstance(cfg["log_level"], str):
            level = cfg["log_level"].strip().upper()
            if level in _LOG_LEVELS:
                s = replace(s, log_level=level)

        return s

    @classmethod
    def from_env(cls, base: IoSettings | None = None, prefix: str = "BINPARA_IO_") -> IoSettings:
        """
        Build IoSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - BINPARA_IO_ENCODING
            - BINPARA_IO_FAIL_FAST (1/0/true/false/yes/no/on/off)
            - BINPARA_IO_FSYNC
            - BINPARA_IO_LOG_LEVEL
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("encoding", "fail_fast", "fsync", "log_level"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> IoSettings:
        """
        Build IoSettings from a TOML file.

        Search order when `path` is None:
            1) ./binpara.toml (with either top-level [io] or direct keys)
            2) ./pyproject.toml under [tool.binpara.io]

        Returns defaults if no file present or tomllib is unavailable.
        """
        s = cls()
        if tomllib is None:
            return s

        def _load_toml(p: Path) -> dict[str, Any] | None:
            try:
                with p.open("rb") as fh:
                    return tomllib.load(fh)  # type: ignore[arg-type]
            except (OSError, tomllib.TOMLDecodeError) as exc:
                logging.getLogger(__name__).warning("ignoring unreadable config %s: %s", p, exc)
                return None

        cfg: dict[str, Any] | None = None

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "binpara.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        for p in cand:
            if not p.exists():
                continue
            data = _load_toml(p)
            if not isinstance(data, dict):
                continue
            if p.name == "pyproject.toml":
                # Expect [tool.binpara.io]
                tool = data.get("tool", {})
                cfg = tool.get("binpara", {}).get("io", {}) if isinstance(tool, dict) else None
            else:
                # binpara.toml - accept either [io] table or top-level keys
                top = data
                if "io" in top and isinstance(top["io"], dict):
                    cfg = top["io"]
                else:
                    cfg = top
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> IoSettings:
        """
        Load IoSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (binpara.toml, pyproject.toml).

        Returns:
            IoSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
