__path__ = __import__("pkgutil").extend_path(__path__, __name__)  # NOQA: F-821
__title__ = 'sextant'
__author__ = 'Eiko Reishin (影皇嶺臣)'
__license__ = 'MIT'
# Placeholder, modified by dynamic-versioning.
__version__ = "0.0.0"

from .config import *
from .faults import *
from .options import *
from .registry import *
from .compiler import *
from .scanner import *
from .fuzzy import *
from .dispatcher import *
from .values import *
from .parser import *

VersionInfo = __import__("collections").namedtuple("VersionInfo", (
    "major",
    "minor",
    "micro",
    "releaselevel",
    "serial",
    "metadata"
))

# Placeholder, modified by dynamic-versioning.
version_info = VersionInfo(0, 0, 0, "final", 0, "")

__all__ = (
    "__path__",
    "__title__",
    "__author__",
    "__license__",
    "__version__",
    "version_info"
)

# Runtime settings
__all__ += config.__all__  # type: ignore[attr-defined]
# Faults and their codes
__all__ += faults.__all__  # type: ignore[attr-defined]
# Option table: descriptors, registry, compiled tables
__all__ += options.__all__  # type: ignore[attr-defined]
__all__ += registry.__all__  # type: ignore[attr-defined]
__all__ += compiler.__all__  # type: ignore[attr-defined]
# Scanning, matching and dispatching
__all__ += scanner.__all__  # type: ignore[attr-defined]
__all__ += fuzzy.__all__  # type: ignore[attr-defined]
__all__ += dispatcher.__all__  # type: ignore[attr-defined]
# Typed values and the parser facade
__all__ += values.__all__  # type: ignore[attr-defined]
__all__ += parser.__all__  # type: ignore[attr-defined]
