from .config_loader import load_config
from .logging import get_logger
from .seed import set_global_seed

__all__ = ["load_config", "get_logger", "set_global_seed"]
