"""CLI logging setup: plain %(message)s format on stdout, tokens redacted."""

import logging
import sys

from deploygate.redact import SecretRedactingFilter


def setup_cli_logging(verbose=False):
    """Configure root logger with plain message format for CLI commands.

    Produces output identical to print(), so progress lines read naturally in
    a workflow log. ``verbose`` lowers the level to DEBUG (per-request lines).
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG if verbose else logging.INFO)
    root.handlers.clear()
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("%(message)s"))
    # Filter on the handler so records from child loggers are redacted too.
    handler.addFilter(SecretRedactingFilter())
    root.addHandler(handler)
    # httpx logs every request at INFO; keep it out of the progress output.
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)
