"""
ledger_config -- single public entrypoint for application configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    directly.  Returns an ``AppConfig`` -- the sole runtime artifact.

Architecture position:
    Configuration.  Sits above ``ledger_kernel`` and ``ledger_modules``;
    the kernel MUST NEVER import from ``ledger_config``.  Bridges in this
    package translate ``AppConfig`` into kernel/module inputs.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set with the requested name.
    - ``KeyError`` / ``ValueError`` -- missing or invalid settings.

Audit relevance:
    Every successful ``get_active_config()`` call emits a
    ``LEDGER_CONFIG_TRACE`` log entry with the set name, version and
    checksum.
"""

from __future__ import annotations

import logging
from pathlib import Path

from ledger_config.loader import compute_checksum, load_yaml_file, parse_app_config
from ledger_config.schema import AppConfig

_logger = logging.getLogger("ledger_kernel.config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"


def get_active_config(
    name: str = "default",
    config_dir: Path | None = None,
) -> AppConfig:
    """The ONLY public configuration entrypoint.

    Args:
        name: Configuration set name; loads ``<config_dir>/<name>.yaml``.
        config_dir: Override path to the configuration sets directory.
            Defaults to ledger_config/sets/.

    Raises:
        FileNotFoundError: If the configuration set does not exist.
        KeyError: If a required setting is missing.
        ValueError: If a setting is out of range.
    """
    sets_dir = Path(config_dir) if config_dir is not None else _DEFAULT_CONFIG_DIR
    path = sets_dir / f"{name}.yaml"
    if not path.is_file():
        raise FileNotFoundError(f"Configuration set not found: {path}")

    data = load_yaml_file(path)
    config = parse_app_config(data, checksum=compute_checksum(data))

    _logger.info(
        "LEDGER_CONFIG_TRACE",
        extra={
            "trace_type": "LEDGER_CONFIG_TRACE",
            "config_set_name": config.name,
            "config_set_version": config.version,
            "checksum": config.checksum,
        },
    )
    return config


__all__ = ["AppConfig", "get_active_config"]
