"""kudiag - Best-effort diagnostic bundle writer for KUDO operators.

kudiag writes Kubernetes objects, pod logs and arbitrary values into a
deterministic directory tree, recording failures instead of aborting the dump.
"""

__version__ = "0.1.0"
__author__ = "kudiag"
__description__ = "Best-effort diagnostic bundle writer for KUDO operators"

from kudiag.bundle import BundleWriter, PrintMode
from kudiag.config import DIAG_DIR, KUDO_DIR, KudiagConfig

__all__ = [
    "__version__",
    "__author__",
    "__description__",
    "BundleWriter",
    "PrintMode",
    "DIAG_DIR",
    "KUDO_DIR",
    "KudiagConfig",
]
