"""
Configuration management for tikzsketch.

Loads YAML configuration with defaults for every pipeline stage. A loaded
configuration is read-only for the duration of a run.
"""

import os
from dataclasses import asdict, dataclass, field

import yaml


@dataclass
class ClassifyConfig:
    """Thresholds for the rule-based shape classifier."""
    # Reserved for grouping nearby strokes into one shape; not consulted yet.
    segmentation_threshold: float = 70.0
    convexity_threshold: float = 0.5
    open_threshold: float = 0.1
    circularity_threshold: float = 0.5
    rectangularity_threshold: float = 0.5


@dataclass
class ConnectConfig:
    """Configuration for attaching wire endpoints to dots and morphisms."""
    connect_threshold: float = 50.0


@dataclass
class WireConfig:
    """Configuration for wire simplification."""
    angle_threshold: float = 5.0  # degrees off horizontal/vertical
    angle_snap_threshold: int = 45  # degrees


@dataclass
class OutputConfig:
    """Configuration for TikZ emission."""
    grid: float = 0.5
    scale: float = 10.0  # surface width/height in TikZ units
    document_class: str = "standalone"
    tikz_package: str = "freetikz"


@dataclass
class TracingConfig:
    """Configuration for runtime tracing."""
    enabled: bool = False
    level: str = "INFO"
    file_path: str = None
    json_output: bool = False


@dataclass
class DebugConfig:
    """Configuration for debug artifact generation."""
    enabled: bool = False


@dataclass
class PipelineConfig:
    """Complete pipeline configuration."""
    classify: ClassifyConfig = field(default_factory=ClassifyConfig)
    connect: ConnectConfig = field(default_factory=ConnectConfig)
    wire: WireConfig = field(default_factory=WireConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)
    debug: DebugConfig = field(default_factory=DebugConfig)


SECTIONS = ("classify", "connect", "wire", "output", "tracing", "debug")


def load_config(config_path=None):
    """
    Load configuration from YAML file.

    Falls back to defaults for any missing values.
    """
    config = PipelineConfig()

    if config_path and os.path.exists(config_path):
        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data = yaml.safe_load(f) or {}

        config = _merge_config(config, yaml_data)

    return config


def _merge_config(config, yaml_data):
    """Merge YAML data into config dataclass, ignoring unknown keys."""
    for section_name in SECTIONS:
        if section_name not in yaml_data:
            continue
        section = getattr(config, section_name)
        for key, value in (yaml_data[section_name] or {}).items():
            if hasattr(section, key):
                setattr(section, key, value)

    return config


def save_default_config(path):
    """Save default configuration to YAML file for reference."""
    config = PipelineConfig()

    yaml_data = {name: asdict(getattr(config, name)) for name in SECTIONS}
    del yaml_data["tracing"]["file_path"]

    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(yaml_data, f, default_flow_style=False, sort_keys=False)
