"""Application configuration model."""

from pathlib import Path

from pydantic import BaseModel, Field, field_serializer

from yeelightctl.model_manager.persistence import PydanticPersistence

from .enums import FlowAction, FlowPreset, TransitionEffect

DEFAULT_DATA_DIR = Path.home() / ".yeelightctl"
DEFAULT_CONFIG_PATH = DEFAULT_DATA_DIR / "config.json"


class AppConfig(BaseModel):
    """Application configuration and settings."""

    # Paths
    data_dir: Path = Field(
        default_factory=lambda: DEFAULT_DATA_DIR,
        description="Directory for effects, groups, automations, scenes and logs",
    )

    # Network
    discovery_timeout: float = Field(
        default=2.0, gt=0.0, le=60.0, description="How long to listen for bulbs (seconds)"
    )
    bulb_port: int = Field(default=55443, ge=1, le=65535, description="Bulb control port")
    transition_effect: TransitionEffect = Field(
        default=TransitionEffect.SMOOTH, description="Effect used for power changes"
    )
    transition_duration_ms: int = Field(
        default=300, ge=30, description="Duration of smooth power changes (milliseconds)"
    )

    # Flow defaults
    default_flow_count: int = Field(
        default=0, ge=0, description="Repeat count for new flows (0 = forever)"
    )
    default_flow_action: FlowAction = Field(
        default=FlowAction.RECOVER, description="Action after a flow ends"
    )
    default_transition_duration: int = Field(
        default=1000, ge=1, description="Duration of a newly added transition (milliseconds)"
    )
    brightness_kelvin: int = Field(
        default=4000,
        ge=1700,
        le=6500,
        description="Colour temperature used to render brightness-only transitions",
    )

    # Groups
    group_wave_delay_ms: int = Field(
        default=200, ge=0, description="Per-device delay for wave groups (milliseconds)"
    )
    group_random_delay_ms: int = Field(
        default=1000, ge=0, description="Maximum random delay for random groups (milliseconds)"
    )

    # Session
    last_preset: FlowPreset | None = Field(default=None, description="Last started preset")

    @field_serializer("data_dir")
    def serialize_path(self, path: Path) -> str:
        """Serialize Path to string."""
        return str(path)

    @property
    def effects_file(self) -> Path:
        return self.data_dir / "effects.json"

    @property
    def groups_file(self) -> Path:
        return self.data_dir / "groups.json"

    @property
    def automations_file(self) -> Path:
        return self.data_dir / "automations.json"

    @property
    def scenes_file(self) -> Path:
        return self.data_dir / "scenes.json"

    @property
    def log_dir(self) -> Path:
        return self.data_dir / "logs"

    def ensure_directories(self) -> None:
        """Create data directories if they don't exist."""
        self.data_dir.mkdir(parents=True, exist_ok=True)

    @classmethod
    def load_or_default(cls, path: Path | None = None) -> "AppConfig":
        """
        Load config from file or return default.

        Args:
            path: Path to config file. If None, uses default location
                  (~/.yeelightctl/config.json).

        Raises:
            ConfigFileInvalidError: If config file has invalid JSON syntax
            ConfigValidationError: If config values fail validation
        """
        if path is None:
            path = DEFAULT_CONFIG_PATH

        config = PydanticPersistence.load_json_or_default(path, cls)
        config.ensure_directories()
        return config

    def save(self, path: Path | None = None) -> None:
        """Save config to file."""
        PydanticPersistence.save_json(self, path or DEFAULT_CONFIG_PATH)
