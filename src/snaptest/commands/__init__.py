"""Command implementations exposed by the snaptest CLI."""

from .config import show_config
from .plan import show_plan
from .run import run_checkpoint

__all__ = [
    "run_checkpoint",
    "show_config",
    "show_plan",
]
