"""
Config Manager

Reads the YAML configuration (a single file or a root file listing
`include:` parts) and turns it into a typed AppConfig.
"""

import yaml
from pathlib import Path
from typing import Dict, List, Optional, Union

from sceneplay.models.config import AppConfig
from sceneplay.utils.logger import configure_logger, get_logger, LogCategory

log = get_logger().for_category(LogCategory.CONFIG)

CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"


def read_yaml(path: Path) -> Dict:
    """Parse one YAML file; an empty file is an empty mapping"""
    with open(path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


class ConfigManager:
    """
    Playback configuration loader.

    config.yaml either holds every section itself or lists section files
    under `include:`. Any failure (missing file, broken YAML, invalid values)
    switches to factory_defaults.yaml. The logging section is applied to the
    shared logger after every load.

    Example:
        manager = ConfigManager()
        manager.load()

        manager.render.arrow_head_size    # 12
        manager.playback.autoplay         # False
    """

    def __init__(
        self,
        config_path: Union[str, Path] = "config.yaml",
        defaults_path: Union[str, Path] = "factory_defaults.yaml",
        config_dir: Optional[Path] = None,
    ):
        """
        Args:
            config_path: Root config file (relative to config_dir unless absolute)
            defaults_path: Fallback file, resolved the same way
            config_dir: Where the YAML files live (the packaged config/ by default)
        """
        self.config_dir = Path(config_dir) if config_dir else CONFIG_DIR
        self.config_path = self._resolve(config_path)
        self.factory_defaults_path = self._resolve(defaults_path)
        self.data: Dict = {}
        self.config: AppConfig = AppConfig()

    def _resolve(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.config_dir / path

    def load(self) -> AppConfig:
        """
        Load config.yaml (following includes), or the factory defaults when
        that fails, then apply the logging section.

        Raises:
            FileNotFoundError: the factory defaults file itself is missing
        """
        try:
            root = read_yaml(self.config_path)
            includes = root.get("include")
            if includes:
                self.data = self._merge_includes(includes, self.config_path.parent)
            else:
                log.info("Config loaded from single file", path=self.config_path.name)
                self.data = root
            self.config = AppConfig.from_dict(self.data)

        except Exception as ex:
            log.error(
                "Config unusable, reverting to factory defaults",
                path=str(self.config_path),
                error=f"{type(ex).__name__}: {ex}",
            )
            self.data = read_yaml(self.factory_defaults_path)
            self.config = AppConfig.from_dict(self.data)

        configure_logger(min_level=self.config.logging.level, use_colors=self.config.logging.colors)
        return self.config

    def _merge_includes(self, filenames: List[str], base_dir: Path) -> Dict:
        """Shallow-merge the listed files in order; later files win per section"""
        merged: Dict = {}
        for name in filenames:
            part = base_dir / name
            if not part.exists():
                log.error("Included config file missing", file=name)
                raise FileNotFoundError(part)
            sections = read_yaml(part)
            merged.update(sections)
            log.debug("Config part merged", file=name, sections=", ".join(sections))

        log.info("Config loaded from includes", files=len(filenames), sections=", ".join(merged))
        return merged

    # ===== Accessors =====

    @property
    def render(self):
        return self.config.render

    @property
    def playback(self):
        return self.config.playback

    @property
    def logging(self):
        return self.config.logging
