"""Reporting version string."""

from __future__ import annotations

import logging
from typing import Optional

from metricslog.config.process_state import ProcessState, get_process_state
from metricslog.config.settings import BuildSettings

logger = logging.getLogger(__name__)

DEVEL_SUFFIX = "-devel"


class VersionProvider:
    """Compute the version string reported with every log."""

    def __init__(
        self,
        build: Optional[BuildSettings],
        process_state: Optional[ProcessState] = None,
    ) -> None:
        self.build = build
        self.process_state = process_state or get_process_state()

    def version_string(self) -> str:
        """Return base version + process extension + ``-devel`` for unofficial builds.

        An empty string means the version is unknown; it is returned, and
        logged, when no build info is available.
        """
        if self.build is None or not self.build.version:
            logger.error("Unable to retrieve version info.")
            return ""

        version = self.build.version
        extension = self.process_state.version_extension
        if extension:
            version += extension
        if not self.build.official:
            version += DEVEL_SUFFIX
        return version


__all__ = ["DEVEL_SUFFIX", "VersionProvider"]
