"""Top-level package for the signal-to-story pipeline.

Exposes the job registry so callers can do
`from signal_story import build_job; build_job("nuisance-watch").run()`.
"""

from importlib import metadata as _metadata

try:
    __version__: str = _metadata.version("signal-story")
except _metadata.PackageNotFoundError:  # pragma: no cover – running from source
    __version__ = "0.0.0"

from .workflows.jobs import JOB_NAMES, build_job  # convenience re-export

__all__ = ["build_job", "JOB_NAMES", "__version__"]
