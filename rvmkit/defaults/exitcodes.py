"""
rvmkit exit codes.

Carbon copies of the POSIX ``os.EX_*`` codes that ``rvmkit-call`` uses, since
those are Unix only. See ``sysexits.h`` for more information.
"""

EX_GENERIC = 1  # Catchall for general errors

EX_OK = 0  # No error occurred
EX_USAGE = 64  # The command was used incorrectly
EX_CONFIG = 78  # Configuration error occurred.
