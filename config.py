import logging
import logging.config
import os
from dataclasses import dataclass, fields, replace
from typing import Any, Dict, Optional

import numpy as np
import yaml

CONFIG_ENV = "RUNSTATS_CONFIG"


@dataclass(frozen=True)
class StatsConfig:
    dtype: str = "float64"
    sqrt_tolerance: float = 1e-5
    logging: Optional[Dict[str, Any]] = None

    def __post_init__(self) -> None:
        try:
            dt = np.dtype(self.dtype)
        except TypeError as e:
            raise ValueError("dtype %r is not understood" % (self.dtype,)) from e
        if not np.issubdtype(dt, np.number):
            raise ValueError("dtype must be numeric, got %s" % dt)
        if not self.sqrt_tolerance > 0:
            raise ValueError("sqrt_tolerance must be > 0")


_config: Optional[StatsConfig] = None


def _read_yaml(path: str) -> Dict[str, Any]:
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def load_config(path: Optional[str] = None) -> StatsConfig:
    """Read a YAML config, ``$RUNSTATS_CONFIG`` when no path is given."""
    if path is None:
        path = os.environ.get(CONFIG_ENV)
    if not path:
        return StatsConfig()

    data = _read_yaml(path)
    if not isinstance(data, dict):
        raise ValueError("%s must hold a mapping" % path)
    known = {f.name for f in fields(StatsConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError("unknown config keys in %s: %s" % (path, ", ".join(unknown)))
    # yaml 1.1 reads "1e-5" as a string
    if "sqrt_tolerance" in data:
        data["sqrt_tolerance"] = float(data["sqrt_tolerance"])
    return replace(StatsConfig(), **data)


def get_config() -> StatsConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(cfg: Optional[StatsConfig]) -> Optional[StatsConfig]:
    """Install ``cfg`` as the process-wide config and return the previous one.

    ``None`` drops the cached config so the next lookup reloads it.
    """
    global _config
    previous, _config = _config, cfg
    return previous


def setup_logging(cfg: Optional[StatsConfig] = None) -> None:
    cfg = cfg or get_config()
    if cfg.logging:
        logging.config.dictConfig(cfg.logging)
    else:
        logging.basicConfig(level=logging.WARNING)
