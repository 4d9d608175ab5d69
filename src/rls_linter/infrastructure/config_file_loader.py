"""Load [tool.rlslinter] from pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from pathlib import Path
from typing import Optional

from rls_linter.domain.constants import PYPROJECT_SECTION

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

logger = logging.getLogger(__name__)


class ConfigFileLoader:
    """
    Loads config from the nearest pyproject.toml.
    """

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> dict[str, object]:
        """Load the [tool.rlslinter] table; empty when the nearest pyproject.toml has none."""
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.is_file():
                continue
            try:
                with config_file.open("rb") as f:
                    data = toml_lib.load(f)
            except OSError as exc:
                logger.warning("Cannot read %s: %s", config_file, exc)
                continue
            tool_section = data.get("tool", {}) or {}
            logger.debug("Using configuration from %s", config_file)
            return dict(tool_section.get(PYPROJECT_SECTION, {}) or {})
        return {}
