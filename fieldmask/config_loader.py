import os
import threading
from functools import lru_cache
from typing import Optional

from fieldmask.config.models import MaskingFile
from fieldmask.core.model import MaskingEngine
from fieldmask.masks import build_configuration

DEFAULT_CONFIG_PATH = "masking.yml"


@lru_cache()
def load_config(path: Optional[str] = None) -> MaskingFile:
    """Load the masking rules.

    Parameters
    ----------
    path: Optional[str]
        Explicit path to the config file. If not provided, the
        ``FIELDMASK_CONFIG_PATH`` environment variable is used. Defaults
        to ``masking.yml``.
    """
    cfg_path = path or os.getenv("FIELDMASK_CONFIG_PATH", DEFAULT_CONFIG_PATH)
    return MaskingFile.from_yaml(cfg_path)


@lru_cache()
def get_engine(path: Optional[str] = None, aggregate_errors: bool = False) -> MaskingEngine:
    """Initialise and cache a root :class:`MaskingEngine` instance."""

    cfg = load_config(path)
    return build_configuration(cfg.masking, cfg.seed, aggregate_errors).as_engine()


@lru_cache()
def get_engine_lock(path: Optional[str] = None, aggregate_errors: bool = False) -> threading.Lock:
    """Lock guarding the engine ``get_engine`` returns for the same arguments.

    Random and incremental masks keep state, so every caller sharing that
    engine must hold this lock while masking.
    """
    return threading.Lock()
