from __future__ import annotations
import logging
from pathlib import Path
import yaml
from typing import Optional

DEFAULT_CONFIG_PATH = Path('kvstore.yml')


def configure_logging(config_path: Optional[Path] = None) -> logging.Logger:
    """Configure root logging for applications embedding kvstore.

    Reads `log_level` from the YAML config file when it exists, then resets
    the root handlers to that level. A missing file, unreadable YAML or an
    unknown level name leaves the level at WARNING. Returns a module logger.
    """
    level = logging.WARNING

    cfg_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if cfg_path.exists():
        try:
            with cfg_path.open('r', encoding='utf-8') as _f:
                _cfg = yaml.safe_load(_f) or {}
            _lvl = _cfg.get('log_level') if isinstance(_cfg, dict) else None
            if _lvl:
                resolved = logging.getLevelName(str(_lvl).upper())
                if isinstance(resolved, int):
                    level = resolved
        except (OSError, yaml.YAMLError):
            level = logging.WARNING

    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)
    logging.basicConfig(level=level, format='%(asctime)s %(levelname)s [%(name)s]: %(message)s')
    logger = logging.getLogger(__name__)
    logger.debug("Log level set to %s", logging.getLevelName(level))

    # redis-py is chatty at debug level
    logging.getLogger('redis').setLevel(max(level, logging.INFO))

    return logger
