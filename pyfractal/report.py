"""Console reporting. Status lines always print; ``log`` only with --verbose."""

import sys

VERBOSE = False


def set_verbose(flag: bool):
    global VERBOSE
    VERBOSE = bool(flag)


def log(message, *args, **kwargs):
    if VERBOSE:
        print(message, *args, **kwargs)


def fatal(cause):
    """Print the cause of an unrecoverable failure to stderr."""
    print(f"error: {cause}", file=sys.stderr)
