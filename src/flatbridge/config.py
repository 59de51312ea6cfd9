"""Saved transfer configurations for flatbridge."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml

from flatbridge.orchestrator import TransferDirection

DELIMITER_NAMES = {
    "comma": ",",
    "tab": "\t",
    "semicolon": ";",
    "pipe": "|",
}


def resolve_delimiter(value: str) -> str:
    """Resolve a delimiter name or literal into a single character.

    Args:
        value: A name from DELIMITER_NAMES, the escape ``\\t``, or one character

    Returns:
        The delimiter character

    Raises:
        ValueError: If the value is empty or longer than one character

    Examples:
        >>> resolve_delimiter("tab")
        '\\t'
        >>> resolve_delimiter(";")
        ';'
    """
    if value is None or value == "":
        raise ValueError("Delimiter is required")

    named = DELIMITER_NAMES.get(value.lower())
    if named:
        return named
    if value == "\\t":
        return "\t"
    if len(value) != 1:
        names = ", ".join(DELIMITER_NAMES)
        raise ValueError(
            f"Delimiter must be a single character or one of {names}, got '{value}'"
        )
    return value


def delimiter_name(delimiter: str) -> str:
    """Return the friendly name of a delimiter, or the character itself."""
    for name, char in DELIMITER_NAMES.items():
        if char == delimiter:
            return name
    return delimiter


class FlatFileSettings:
    """File side of a saved transfer."""

    def __init__(self, filename: str, delimiter: str = ",") -> None:
        """Initialize flat-file settings.

        Args:
            filename: File name used for the table name and the output file
            delimiter: Delimiter name or character

        Raises:
            ValueError: If filename is empty or the delimiter is invalid
        """
        if not filename:
            raise ValueError("Filename is required")
        self.filename = filename
        self.delimiter = resolve_delimiter(delimiter)


class DatabaseSettings:
    """Database side of a saved transfer."""

    def __init__(self, url: str) -> None:
        if not url:
            raise ValueError("Database url is required")
        self.url = url


class TransferProfile:
    """A named, saved transfer configuration."""

    def __init__(
        self,
        name: str,
        direction: TransferDirection,
        flat_file: FlatFileSettings,
        database: DatabaseSettings | None = None,
        table: str | None = None,
        selected_columns: list[str] | None = None,
    ) -> None:
        """Initialize a transfer profile.

        Args:
            name: Profile name
            direction: Transfer direction
            flat_file: File-side settings
            database: Database settings, required for SOURCE_TO_FILE
            table: Source table, required for SOURCE_TO_FILE
            selected_columns: Columns to transfer (all columns if None)

        Raises:
            ValueError: If a SOURCE_TO_FILE profile lacks a database or table
        """
        if direction is TransferDirection.SOURCE_TO_FILE:
            if database is None:
                raise ValueError(f"Profile '{name}' exports from a database but has no 'database'")
            if not table:
                raise ValueError(f"Profile '{name}' exports from a database but has no 'table'")

        self.name = name
        self.direction = direction
        self.flat_file = flat_file
        self.database = database
        self.table = table
        self.selected_columns = selected_columns or []


class BridgeConfig:
    """Collection of saved transfer profiles and shared settings."""

    def __init__(
        self,
        profiles: dict[str, TransferProfile],
        output_dir: str | None = None,
        history_url: str | None = None,
    ) -> None:
        """Initialize the configuration.

        Args:
            profiles: Dictionary of profile name to TransferProfile
            output_dir: Optional directory for transfer output files
            history_url: Optional job-history database URL
        """
        self.profiles = profiles
        self.output_dir = output_dir
        self.history_url = history_url

    def get_profile(self, name: str) -> TransferProfile | None:
        """Get a profile by name, or None if it does not exist."""
        return self.profiles.get(name)

    @classmethod
    def from_yaml(cls, config_path: Path) -> BridgeConfig:
        """Load configuration from a YAML file.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            BridgeConfig instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is invalid

        Example YAML structure:
            output_dir: data/exports      # Optional
            history_url: sqlite:///flatbridge.db  # Optional
            profiles:
              orders_import:
                direction: file_to_source
                flat_file:
                  filename: orders.csv
                  delimiter: comma
                selected_columns: [order_id, total]
              orders_export:
                direction: source_to_file
                database:
                  url: postgresql://localhost/shop
                table: orders
                flat_file:
                  filename: orders_out.tsv
                  delimiter: tab
        """
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")

        with open(config_path, encoding="utf-8") as f:
            data = yaml.safe_load(f)

        if not isinstance(data, dict) or "profiles" not in data:
            raise ValueError("Config file must contain 'profiles' section")

        profiles_data = data["profiles"] or {}
        if not isinstance(profiles_data, dict):
            raise ValueError("'profiles' must be a dictionary")

        profiles = {}
        for profile_name, profile_data in profiles_data.items():
            profiles[profile_name] = cls._parse_profile(profile_name, profile_data)

        return cls(
            profiles=profiles,
            output_dir=data.get("output_dir"),
            history_url=data.get("history_url"),
        )

    @staticmethod
    def _parse_profile(name: str, profile_data: Any) -> TransferProfile:
        """Parse a profile from configuration data.

        Raises:
            ValueError: If the profile configuration is invalid
        """
        if not isinstance(profile_data, dict):
            raise ValueError(f"Profile '{name}' must be a dictionary")

        if "direction" not in profile_data:
            raise ValueError(f"Profile '{name}' missing 'direction'")
        try:
            direction = TransferDirection(profile_data["direction"])
        except ValueError:
            allowed = ", ".join(d.value for d in TransferDirection)
            raise ValueError(
                f"Profile '{name}' direction must be one of {allowed}, "
                f"got '{profile_data['direction']}'"
            ) from None

        ff_data = profile_data.get("flat_file")
        if not isinstance(ff_data, dict):
            raise ValueError(f"Profile '{name}' missing 'flat_file' dictionary")
        if "filename" not in ff_data:
            raise ValueError(f"Profile '{name}' flat_file missing 'filename'")
        flat_file = FlatFileSettings(
            filename=str(ff_data["filename"]), delimiter=str(ff_data.get("delimiter", ","))
        )

        database = None
        if profile_data.get("database"):
            db_data = profile_data["database"]
            if not isinstance(db_data, dict) or "url" not in db_data:
                raise ValueError(f"Profile '{name}' database must be a dictionary with 'url'")
            database = DatabaseSettings(url=db_data["url"])

        selected = profile_data.get("selected_columns")
        if selected is not None and not isinstance(selected, list):
            raise ValueError(f"Profile '{name}' selected_columns must be a list")

        return TransferProfile(
            name=name,
            direction=direction,
            flat_file=flat_file,
            database=database,
            table=profile_data.get("table"),
            selected_columns=[str(col) for col in selected] if selected else None,
        )

    def add_or_update_profile(self, profile: TransferProfile, force: bool = False) -> bool:
        """Add a new profile or update an existing one.

        Args:
            profile: TransferProfile to add or update
            force: If True, overwrite an existing profile

        Returns:
            True if the profile was added/updated

        Raises:
            ValueError: If the profile already exists and force=False
        """
        if profile.name in self.profiles and not force:
            raise ValueError(
                f"Profile '{profile.name}' already exists. Use force=True to overwrite."
            )

        self.profiles[profile.name] = profile
        return True

    def remove_profile(self, name: str) -> bool:
        """Remove a profile. Returns False if there was nothing to remove."""
        return self.profiles.pop(name, None) is not None

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert config to dictionary suitable for YAML serialization."""
        profiles_dict = {}

        for profile_name, profile in self.profiles.items():
            profile_dict: dict[str, Any] = {
                "direction": profile.direction.value,
                "flat_file": {
                    "filename": profile.flat_file.filename,
                    "delimiter": delimiter_name(profile.flat_file.delimiter),
                },
            }
            if profile.database:
                profile_dict["database"] = {"url": profile.database.url}
            if profile.table:
                profile_dict["table"] = profile.table
            if profile.selected_columns:
                profile_dict["selected_columns"] = list(profile.selected_columns)

            profiles_dict[profile_name] = profile_dict

        result: dict[str, Any] = {}
        if self.output_dir is not None:
            result["output_dir"] = self.output_dir
        if self.history_url is not None:
            result["history_url"] = self.history_url
        result["profiles"] = profiles_dict

        return result

    def save_to_yaml(self, config_path: Path) -> None:
        """Save configuration to a YAML file."""
        with open(config_path, "w", encoding="utf-8") as f:
            yaml.dump(self.to_yaml_dict(), f, default_flow_style=False, sort_keys=False)
