# hopper/cli/context.py
"""
Central CLI context.

Global options (--config, --log-level) are parsed once by the root
callback and stored here; commands read config and build the service
through this module only.

Usage:
    ctx = CLIContext.from_typer(typer_ctx)
    service = build_service(ctx.config)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import typer

from hopper.core.config import HopperConfig, load_config
from hopper.service import HopperService


@dataclass
class CLIContext:
    config_path: Optional[Path] = None
    log_level: Optional[str] = None
    _config: Optional[HopperConfig] = field(default=None, repr=False)

    @classmethod
    def from_typer(cls, ctx: typer.Context) -> "CLIContext":
        obj = ctx.find_root().obj
        return obj if isinstance(obj, cls) else cls()

    @property
    def config(self) -> HopperConfig:
        """Loaded lazily; raises ConfigError on an invalid file."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config


def build_service(config: HopperConfig) -> HopperService:
    return HopperService.from_config(config)


__all__ = ["CLIContext", "build_service"]
