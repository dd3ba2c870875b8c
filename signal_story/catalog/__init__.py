"""Static configuration data handed to jobs at construction.

Submodules are imported explicitly (``from signal_story.catalog.sources
import SOURCES``); this package does not re-export them because
:mod:`sources` depends on the ingestion service, which itself needs
:mod:`coverage`.
"""
