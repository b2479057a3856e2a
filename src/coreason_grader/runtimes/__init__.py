from .cargo import CargoRuntime
from .process import run_process

__all__ = ["CargoRuntime", "run_process"]
