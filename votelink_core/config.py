"""
Configuration for vote resolution.

Settings live in config.yaml (path overridable with $VOTELINK_CONFIG).
Thresholds and confidences are centralized in frozen dataclasses so the
resolver and indexes never carry magic numbers.
"""
import os
from dataclasses import dataclass, fields
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from rich.console import Console

console = Console()

DEFAULT_CONFIG_PATH = "config.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "resolver": {
        "roll_window_days": 1,
        "motion_min_score": 0.7,
        "direct_bill_key_confidence": 1.0,
        "exact_roll_confidence": 1.0,
        "bill_same_day_confidence": 0.9,
        "amendment_confidence": 0.7,
    },
    "issues": {"default_congress": 119},
}


@dataclass(frozen=True)
class ResolverConfig:
    """Thresholds and confidences used by VoteResolver."""

    # D +/- N window for exact roll lookups
    roll_window_days: int = 1

    # Minimum compare_motions score accepted by the motion strategy
    motion_min_score: float = 0.7

    # Confidence assigned by each strategy
    direct_bill_key_confidence: float = 1.0
    exact_roll_confidence: float = 1.0
    bill_same_day_confidence: float = 0.9
    amendment_confidence: float = 0.7

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "ResolverConfig":
        """Build from a config section; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in (data or {}).items() if k in known})


@dataclass(frozen=True)
class IssuesConfig:
    """Settings for IssuesIndex."""

    # Congress assumed for issue identifiers that do not carry one ("HR15")
    default_congress: int = 119

    @classmethod
    def from_dict(cls, data: Optional[dict[str, Any]]) -> "IssuesConfig":
        data = data or {}
        congress = os.getenv("VOTELINK_DEFAULT_CONGRESS") or data.get("default_congress") or cls.default_congress
        return cls(default_congress=int(congress))


def load_config(config_path: Optional[str] = None) -> dict[str, Any]:
    """
    Load settings from config.yaml.

    Args:
        config_path: Path to config file (default: $VOTELINK_CONFIG or config.yaml)

    Returns:
        Configuration dictionary; sections missing from the file keep their defaults
    """
    load_dotenv()
    config_path = config_path or os.getenv("VOTELINK_CONFIG", DEFAULT_CONFIG_PATH)

    try:
        with open(config_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        console.print(f"[yellow]Warning: {config_path} not found. Using default config.[/yellow]")
        return {section: dict(values) for section, values in DEFAULT_CONFIG.items()}

    config = {section: dict(values) for section, values in DEFAULT_CONFIG.items()}
    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def get_resolver_config(config: Optional[dict[str, Any]] = None) -> ResolverConfig:
    config = config if config is not None else load_config()
    return ResolverConfig.from_dict(config.get("resolver"))


def get_issues_config(config: Optional[dict[str, Any]] = None) -> IssuesConfig:
    config = config if config is not None else load_config()
    return IssuesConfig.from_dict(config.get("issues"))
