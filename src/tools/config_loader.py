"""
Configuration loader for LOD profiles and environment variables.
"""

import os
from pathlib import Path
from typing import Dict, Any, Optional
import yaml


DEFAULT_PROFILE = "default"


class ConfigLoader:
    """Load and manage configuration from YAML files and environment."""

    CONFIG_DIR = Path(__file__).parent.parent.parent / "configs"

    @classmethod
    def profile_path(cls, profile_name: str) -> Path:
        return cls.CONFIG_DIR / f"{profile_name}.yaml"

    @classmethod
    def load_profile(cls, profile_name: str = DEFAULT_PROFILE) -> Dict[str, Any]:
        """
        Load a LOD profile configuration.

        Args:
            profile_name: Name of the profile (default, dense-map, ...)

        Returns:
            Dictionary with configuration values

        Raises:
            FileNotFoundError: If profile doesn't exist
        """
        profile_path = cls.profile_path(profile_name)

        if not profile_path.exists():
            available = sorted(f.stem for f in cls.CONFIG_DIR.glob("*.yaml"))
            raise FileNotFoundError(
                f"Profile '{profile_name}' not found. Available profiles: {', '.join(available)}"
            )

        with open(profile_path, "r") as f:
            return yaml.safe_load(f) or {}

    @classmethod
    def get_profile_from_env(cls) -> Optional[str]:
        """Get LOD profile name from LOD_PROFILE environment variable."""
        return os.getenv("LOD_PROFILE")

    @classmethod
    def load_default_or_env_profile(cls) -> Dict[str, Any]:
        """
        Load LOD profile from environment variable or use the default profile.

        An explicitly requested profile must exist. A missing default profile
        (e.g. when running from an installed wheel without ``configs/``)
        yields an empty dictionary so built-in defaults apply.

        Returns:
            Configuration dictionary
        """
        profile = cls.get_profile_from_env()
        if profile:
            return cls.load_profile(profile)
        if not cls.profile_path(DEFAULT_PROFILE).exists():
            return {}
        return cls.load_profile(DEFAULT_PROFILE)


def get_config() -> Dict[str, Any]:
    """Convenience function to get current configuration."""
    return ConfigLoader.load_default_or_env_profile()
