"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

APP_NAME = "plan-board"
APP_AUTHOR = "plan-board"


@dataclass
class Config:
	"""Central configuration with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	db_path: Path = field(init=False)
	log_dir: Path = field(init=False)

	# User-configurable
	host: str = "127.0.0.1"
	port: int = 3000
	log_level: str = "INFO"

	# Explicit database location, wins over data_dir/plans.db
	db_override: Path | None = None

	def __post_init__(self) -> None:
		self.db_path = self.db_override or self.data_dir / "plans.db"
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)


def _apply_env_overrides(config: Config) -> Config:
	"""Apply PLAN_BOARD_* environment variable overrides."""
	path_map = {
		"PLAN_BOARD_CONFIG_DIR": "config_dir",
		"PLAN_BOARD_DATA_DIR": "data_dir",
		"PLAN_BOARD_DB_PATH": "db_override",
	}
	for env_key, attr in path_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(config, attr, Path(val))

	host = os.getenv("PLAN_BOARD_HOST")
	if host:
		config.host = host
	port = os.getenv("PLAN_BOARD_PORT")
	if port:
		try:
			config.port = int(port)
		except ValueError:
			raise ValueError(f"PLAN_BOARD_PORT must be an integer, got {port!r}")
	log_level = os.getenv("PLAN_BOARD_LOG_LEVEL")
	if log_level:
		config.log_level = log_level.upper()

	# Recompute derived paths after overrides
	config.__post_init__()
	return config


def _apply_toml(config: Config) -> Config:
	"""Apply config.toml overrides if file exists."""
	toml_path = config.config_dir / "config.toml"
	if not toml_path.exists():
		return config

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	path_fields = {"config_dir", "data_dir"}
	for key, val in data.items():
		if key == "db_path":
			config.db_override = Path(os.path.expanduser(val))
		elif key in path_fields:
			setattr(config, key, Path(os.path.expanduser(val)))
		elif hasattr(config, key):
			setattr(config, key, val)

	# Recompute derived paths after toml overrides
	config.__post_init__()
	return config


def load_config() -> Config:
	"""Load config with precedence: env vars > config.toml > defaults."""
	config = Config()
	# Env is applied twice: once to locate config.toml, once to win over it
	config = _apply_env_overrides(config)
	config = _apply_toml(config)
	config = _apply_env_overrides(config)
	config.ensure_dirs()
	return config


# Singleton
_config: Config | None = None


def get_config() -> Config:
	"""Get or create the global config instance."""
	global _config
	if _config is None:
		_config = load_config()
	return _config
