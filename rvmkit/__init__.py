"""
rvmkit package
"""

__version__ = "0.1.0"

# Import rvmkit._logging as early as possible so the extra log levels exist
# before any module asks for a logger.
import rvmkit._logging  # isort:skip  pylint: disable=unused-import
