# Kernel sources package
from .registry import register_kernel, load_kernel

__all__ = [
    "load_kernel",
    "register_kernel",
]
__version__ = "0.3.0"
