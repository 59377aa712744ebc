"""
This module contains the function calls to execute command line scripts
"""

import logging
import sys

log = logging.getLogger(__name__)


def rvmkit_call():
    """
    Directly call an rvmkit execution module function
    """
    import rvmkit.cli.call

    if "" in sys.path:
        sys.path.remove("")
    client = rvmkit.cli.call.RvmKitCall()
    try:
        sys.exit(client.run())
    except KeyboardInterrupt:
        print("\nExiting gracefully on Ctrl-c", file=sys.stderr, flush=True)
        sys.exit(1)
