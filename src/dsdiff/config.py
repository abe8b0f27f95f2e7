"""
Global Configuration and Layout Defaults.

This module centralizes the constants used by the diff engine and the
force-directed layout. Every simulation and viewport knob lives on a
pydantic model so a project can override it from `.dsdiff/config.yaml`.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError

logger = logging.getLogger(__name__)

# --- Docstore sections ---
DATA_SECTION = "docstore/data"
METADATA_SECTION = "docstore/metadata"
REF_DOC_INFO_SECTION = "docstore/ref_doc_info"

# Envelope key some exporters wrap the real payload fields in
DATA_ENVELOPE_KEY = "__data__"

DEFAULT_CONFIG_PATH = Path(".dsdiff/config.yaml")

# --- Legend ---
STATUS_COLORS: Dict[str, str] = {
    "deleted": "#ff4a4a",
    "added": "#50e3c2",
    "modified": "#f5a623",
}

TYPE_COLORS: Dict[str, str] = {
    "document": "#4a90e2",
    "text-node": "#b8b8b8",
}

NODE_RADII: Dict[str, int] = {
    "document": 30,
    "text-node": 8,
}


class LayoutConfig(BaseModel):
    """
    Configuration for the force simulation.

    Defaults mirror the classic d3-force setup: a many-body charge of -200,
    link rest lengths of 100 (document involved) and 30 (text to text),
    and an alpha decaying from 1 to alpha_min in roughly 300 frames.
    """
    width: float = Field(default=1000.0, gt=0)
    height: float = Field(default=800.0, gt=0)

    # Repulsion
    charge_strength: float = -200.0
    distance_min: float = Field(default=1.0, gt=0)

    # Springs
    document_link_distance: float = Field(default=100.0, gt=0)
    text_link_distance: float = Field(default=30.0, gt=0)

    # Centering (1.0 snaps the centroid to the canvas centre every frame)
    center_strength: float = Field(default=1.0, ge=0.0, le=1.0)

    # Energy
    alpha: float = Field(default=1.0, ge=0.0, le=1.0)
    alpha_min: float = Field(default=0.001, gt=0.0, lt=1.0)
    alpha_decay: float = Field(default=1 - 0.001 ** (1 / 300), gt=0.0, lt=1.0)
    alpha_target: float = Field(default=0.0, ge=0.0, le=1.0)
    drag_alpha_target: float = Field(default=0.3, ge=0.0, le=1.0)
    velocity_decay: float = Field(default=0.4, ge=0.0, le=1.0)

    # Initial placement
    initial_radius: float = Field(default=10.0, gt=0)
    seed: int = 0

    @property
    def center(self) -> Tuple[float, float]:
        return self.width / 2, self.height / 2


class ViewportConfig(BaseModel):
    """Configuration for the pan/zoom transform and the auto-fit."""
    width: float = Field(default=1000.0, gt=0)
    height: float = Field(default=800.0, gt=0)
    scale_min: float = Field(default=0.1, gt=0)
    scale_max: float = Field(default=4.0, gt=0)
    fit_padding: float = Field(default=40.0, ge=0)
    fit_max_scale: float = Field(default=1.0, gt=0)


class Settings(BaseModel):
    """Top-level settings as read from the YAML file."""
    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    viewport: ViewportConfig = Field(default_factory=ViewportConfig)


def load_config(config_path: Optional[Path] = None) -> Settings:
    """
    Load settings from a YAML file.

    A missing, unreadable or invalid file yields the defaults; the problem
    is logged rather than raised so a bad config never blocks a comparison.
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
    if not path.exists():
        return Settings()

    try:
        with open(path, "r") as f:
            data: Any = yaml.safe_load(f) or {}
    except (OSError, yaml.YAMLError) as e:
        logger.warning(f"Failed to read config {path}: {e}")
        return Settings()

    if not isinstance(data, dict):
        logger.warning(f"Ignoring config {path}: expected a mapping at the top level")
        return Settings()

    try:
        return Settings.model_validate({
            "layout": data.get("layout") or {},
            "viewport": data.get("viewport") or {},
        })
    except ValidationError as e:
        logger.warning(f"Invalid config {path}, using defaults: {e}")
        return Settings()
