"""
Application settings management.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Optional
from enum import Enum

from gutterdiff.core.markers.classifier import (
    MAX_DIFF_CELLS,
    MAX_DIFF_LINES,
    MAX_DIFF_TEXT_CHARS,
    DiffAlgorithm,
    MarkerOptions,
)
from gutterdiff.core.models import (
    DEFAULT_AMBIGUITY_LOOKAHEAD,
    WINDOW_ANCHOR_MAX_CANDIDATES_PER_LINE,
    WINDOW_ANCHOR_RADIUS_MAX,
    WINDOW_ANCHOR_RADIUS_MIN,
    AlignmentLimits,
)


logger = logging.getLogger(__name__)


@dataclass
class EngineSettings:
    """Settings for the alignment engine."""
    algorithm: DiffAlgorithm = DiffAlgorithm.SCALABLE
    max_lines: int = MAX_DIFF_LINES
    max_cells: int = MAX_DIFF_CELLS
    max_text_chars: int = MAX_DIFF_TEXT_CHARS

    # Heuristic tuning
    ambiguity_lookahead: int = DEFAULT_AMBIGUITY_LOOKAHEAD
    window_radius_min: int = WINDOW_ANCHOR_RADIUS_MIN
    window_radius_max: int = WINDOW_ANCHOR_RADIUS_MAX
    max_candidates_per_line: int = WINDOW_ANCHOR_MAX_CANDIDATES_PER_LINE

    def to_limits(self) -> AlignmentLimits:
        return AlignmentLimits(
            max_lines=self.max_lines,
            max_cells=self.max_cells,
            ambiguity_lookahead=self.ambiguity_lookahead,
            window_radius_min=self.window_radius_min,
            window_radius_max=self.window_radius_max,
            max_candidates_per_line=self.max_candidates_per_line,
        )

    def to_marker_options(self) -> MarkerOptions:
        return MarkerOptions(
            algorithm=self.algorithm,
            limits=self.to_limits(),
            max_text_chars=self.max_text_chars,
        )


@dataclass
class UISettings:
    """User interface settings."""
    font_family: str = "Consolas"
    font_size: int = 10
    window_width: int = 1000
    window_height: int = 700
    gutter_width: int = 8
    overview_width: int = 15
    show_overview: bool = True


@dataclass
class ColorSettings:
    """Colors for change markers."""
    added_marker: str = "#28a745"
    modified_marker: str = "#dbab09"
    gutter_background: str = "#fafafa"
    overview_background: str = "#fafafa"
    overview_border: str = "#dcdcdc"
    viewport_overlay: str = "#6464ff"


@dataclass
class ApplicationSettings:
    """Main application settings container."""
    engine: EngineSettings = field(default_factory=EngineSettings)
    ui: UISettings = field(default_factory=UISettings)
    colors: ColorSettings = field(default_factory=ColorSettings)


class SettingsManager:
    """Manager for loading/saving application settings."""

    def __init__(self, settings_path: Optional[Path] = None):
        self.settings_path = settings_path or self._get_default_path()
        self._settings: Optional[ApplicationSettings] = None
        self._observers: list[Callable[[ApplicationSettings], None]] = []

    @staticmethod
    def _get_default_path() -> Path:
        """Get the default settings file path."""
        if os.name == 'nt':
            # Windows
            app_data = os.environ.get('APPDATA', os.path.expanduser('~'))
            return Path(app_data) / 'GutterDiff' / 'settings.json'
        else:
            # Linux/Mac
            config_home = os.environ.get('XDG_CONFIG_HOME',
                                         os.path.expanduser('~/.config'))
            return Path(config_home) / 'gutterdiff' / 'settings.json'

    @property
    def settings(self) -> ApplicationSettings:
        """Get current settings, loading from disk if needed."""
        if self._settings is None:
            self._settings = self.load()
        return self._settings

    def load(self) -> ApplicationSettings:
        """Load settings from disk, falling back to defaults."""
        if not self.settings_path.exists():
            return ApplicationSettings()

        try:
            with open(self.settings_path, 'r', encoding='utf-8') as f:
                data = json.load(f)
            return self._from_dict(data)
        except (OSError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Could not load settings from {self.settings_path}: {e}")
            return ApplicationSettings()

    def save(self, settings: Optional[ApplicationSettings] = None) -> bool:
        """Save settings to disk."""
        settings = settings or self._settings
        if settings is None:
            return False

        try:
            self.settings_path.parent.mkdir(parents=True, exist_ok=True)

            data = self._to_dict(settings)

            with open(self.settings_path, 'w', encoding='utf-8') as f:
                json.dump(data, f, indent=2)

        except OSError as e:
            logger.error(f"Could not save settings to {self.settings_path}: {e}")
            return False

        self._settings = settings
        self._notify_observers()
        return True

    def reset(self) -> ApplicationSettings:
        """Reset to default settings."""
        self._settings = ApplicationSettings()
        self.save()
        return self._settings

    def add_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Add a callback to be notified of settings changes."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[ApplicationSettings], None]) -> None:
        """Remove a settings change observer."""
        if callback in self._observers:
            self._observers.remove(callback)

    def _notify_observers(self) -> None:
        """Notify all observers of settings change."""
        for callback in self._observers:
            callback(self._settings)

    def _to_dict(self, settings: ApplicationSettings) -> dict:
        """Convert settings to dictionary for JSON serialization."""
        def convert(obj: Any) -> Any:
            if isinstance(obj, Enum):
                return obj.name
            elif isinstance(obj, list):
                return [convert(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: convert(v) for k, v in obj.items()}
            else:
                return obj

        return convert(asdict(settings))

    def _from_dict(self, data: dict) -> ApplicationSettings:
        """Convert dictionary back to settings objects."""
        def get_enum(enum_class: type, value: Any) -> Enum:
            if isinstance(value, str):
                try:
                    return enum_class[value]
                except KeyError:
                    return list(enum_class)[0]
            return list(enum_class)[0]

        def section(cls: type, values: Any) -> Any:
            defaults = cls()
            values = values if isinstance(values, dict) else {}
            kwargs = {}
            for name in defaults.__dataclass_fields__:
                default = getattr(defaults, name)
                value = values.get(name, default)
                if isinstance(default, Enum):
                    value = get_enum(type(default), value)
                elif type(value) is not type(default):
                    value = default
                kwargs[name] = value
            return cls(**kwargs)

        return ApplicationSettings(
            engine=section(EngineSettings, data.get('engine')),
            ui=section(UISettings, data.get('ui')),
            colors=section(ColorSettings, data.get('colors')),
        )
