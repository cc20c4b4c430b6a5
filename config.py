"""Configuration management for Hasaba.

Reads configuration from ~/.config/hasaba.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass, field
from typing import List, Optional
import tomllib
import tomli_w

DEFAULT_LIQUIDITY_ACCOUNTS = ["daviplata", "nequi", "empresa", "efectivo", "ahorros"]


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    archive_enabled: bool
    archive_dir: Path
    liquidity_accounts: List[str] = field(
        default_factory=lambda: list(DEFAULT_LIQUIDITY_ACCOUNTS)
    )
    seed_file: Optional[Path] = None

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        home = Path.home()
        base_dir = home / "data" / "hasaba"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="hasaba.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
            archive_enabled=True,
            archive_dir=base_dir / "archives",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "hasaba.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def get_default_seed_file() -> Path:
    """Get the path to the bundled seed registry."""
    return Path(__file__).parent / "db" / "seed" / "registry.yaml"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Args:
        config_path: Optional explicit config file. Defaults to ~/.config/hasaba.toml.

    Returns:
        Config object with loaded or default values.
    """
    config_path = config_path or get_config_path()

    # If config doesn't exist, create it with defaults
    if not config_path.exists():
        config = Config.default()
        _write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    # Parse with defaults for any missing values
    base_dir = Path(data.get("base_dir", Path.home() / "data" / "hasaba"))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", "hasaba.db")

    log_config = data.get("logging", {})
    log_level = log_config.get("level", "INFO")
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    archive_config = data.get("archive", {})
    archive_enabled = archive_config.get("enabled", True)
    archive_dir = Path(archive_config.get("archive_dir", base_dir / "archives"))

    ledger_config = data.get("ledger", {})
    liquidity_accounts = list(
        ledger_config.get("liquidity_accounts", DEFAULT_LIQUIDITY_ACCOUNTS)
    )
    seed_file = ledger_config.get("seed_file")

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        archive_enabled=archive_enabled,
        archive_dir=archive_dir,
        liquidity_accounts=liquidity_accounts,
        seed_file=Path(seed_file) if seed_file else None,
    )


def _write_config(config: Config, config_path: Path) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
        config_path: Destination file.
    """
    config_path.parent.mkdir(parents=True, exist_ok=True)

    ledger = {"liquidity_accounts": list(config.liquidity_accounts)}
    # TOML has no null, so an unset seed file is simply omitted
    if config.seed_file is not None:
        ledger["seed_file"] = str(config.seed_file)

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "archive": {
            "enabled": config.archive_enabled,
            "archive_dir": str(config.archive_dir),
        },
        "ledger": ledger,
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)
