"""Load [tool.dict-views] from pyproject.toml. Infrastructure I/O only."""

import logging
import sys
from pathlib import Path
from typing import Optional

if sys.version_info >= (3, 11):
    import tomllib as toml_lib
else:
    import tomli as toml_lib

logger = logging.getLogger(__name__)


class ConfigFileLoader:
    """Loads config from the nearest pyproject.toml."""

    SECTION: str = "dict-views"

    @staticmethod
    def load_config_from_fs(start: Optional[Path] = None) -> dict[str, object]:
        """Return the [tool.dict-views] table of the nearest pyproject.toml, or {}."""
        current_path = (start or Path.cwd()).resolve()
        for directory in (current_path, *current_path.parents):
            config_file = directory / "pyproject.toml"
            if not config_file.exists():
                continue
            try:
                with config_file.open("rb") as f:
                    data = toml_lib.load(f)
            except (OSError, toml_lib.TOMLDecodeError) as exc:
                logger.warning("Ignoring unreadable %s: %s", config_file, exc)
                continue
            tool_section = data.get("tool", {}) or {}
            section = tool_section.get(ConfigFileLoader.SECTION, {}) or {}
            if not isinstance(section, dict):
                logger.warning("[tool.%s] in %s is not a table; ignoring it.", ConfigFileLoader.SECTION, config_file)
                return {}
            return section
        return {}
