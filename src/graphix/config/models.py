from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from graphix.config.defaults import DIMENSION_MULTIPLE, MAX_DIMENSION, MIN_DIMENSION


class ModelFamily(StrEnum):
    """Supported checkpoint families."""

    ILLUSTRIOUS = "illustrious"
    PONY = "pony"
    SDXL = "sdxl"
    FLUX = "flux"
    SD15 = "sd15"
    REALISTIC = "realistic"


class DimensionKey(StrEnum):
    """Dimension class used to index size presets and pixel budgets."""

    SDXL = "sdxl"
    SD15 = "sd15"
    FLUX = "flux"


class ResolutionTier(StrEnum):
    """Coarse pixel-budget tier for synthesized dimensions."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class QualityPresetId(StrEnum):
    """Quality presets, fastest first."""

    DRAFT = "draft"
    STANDARD = "standard"
    HIGH = "high"
    ULTRA = "ultra"


class ConfigSource(StrEnum):
    """Precedence tier that supplied a resolved value."""

    EXPLICIT = "explicit"
    PRESET = "preset"
    SLOT = "slot"
    GLOBAL = "global"


class DegradationKind(StrEnum):
    """Why a requested value was replaced during resolution."""

    UNKNOWN_PRESET = "unknown_preset"
    UNKNOWN_SLOT = "unknown_slot"
    INVALID_OVERRIDE = "invalid_override"
    DIMENSION_OVERFLOW = "dimension_overflow"


class LoraConfig(BaseModel):
    """A LoRA applied on top of the checkpoint."""

    name: str = Field(description="LoRA filename")
    strength: float = Field(default=1.0, description="Model strength")
    strength_clip: float | None = Field(
        default=None, description="CLIP strength (defaults to strength downstream)"
    )


class GenerationOverrides(BaseModel):
    """Explicit caller overrides, the highest precedence tier.

    Values are deliberately not range-checked here; out-of-range values are
    repaired during resolution and reported as warnings.
    """

    width: int | None = None
    height: int | None = None
    steps: int | None = None
    cfg: float | None = None
    sampler: str | None = None
    scheduler: str | None = None
    model: str | None = None
    negative_prompt: str | None = None
    loras: list[LoraConfig] | None = None

    @field_validator("sampler", "scheduler", "model", mode="before")
    @classmethod
    def blank_to_none(cls, v: object) -> object:
        if isinstance(v, str) and not v.strip():
            return None
        return v


class SlotContext(BaseModel):
    """Placement of a panel within a page-layout template."""

    template_id: str
    slot_id: str
    page_size: str | None = Field(
        default=None, description="Page size preset (None = comic_standard)"
    )
    aspect_ratio: float | None = Field(
        default=None,
        description="Precomputed slot aspect ratio; skips the layout lookup",
    )


class ResolutionRequest(BaseModel):
    """Partial generation parameters to be resolved."""

    size_preset: str | None = None
    quality_preset: str | None = None
    slot: SlotContext | None = None
    overrides: GenerationOverrides = Field(default_factory=GenerationOverrides)

    @field_validator("overrides", mode="before")
    @classmethod
    def none_to_empty_overrides(cls, v: object) -> object:
        return GenerationOverrides() if v is None else v


class ResolutionSources(BaseModel):
    """Provenance of each tracked field of a ``ResolvedConfig``."""

    width: ConfigSource = ConfigSource.GLOBAL
    height: ConfigSource = ConfigSource.GLOBAL
    steps: ConfigSource = ConfigSource.GLOBAL
    cfg: ConfigSource = ConfigSource.GLOBAL
    sampler: ConfigSource = ConfigSource.GLOBAL
    scheduler: ConfigSource = ConfigSource.GLOBAL
    model: ConfigSource = ConfigSource.GLOBAL


class ResolutionWarning(BaseModel):
    """A field whose requested value was replaced by a fallback."""

    field: str
    kind: DegradationKind
    message: str


class ResolvedConfig(BaseModel):
    """Fully resolved generation parameters handed to the generation client."""

    model_config = ConfigDict(protected_namespaces=())

    width: int
    height: int
    aspect_ratio: float
    size_preset_used: str | None = None

    steps: int = Field(ge=1)
    cfg: float = Field(gt=0, allow_inf_nan=False)
    sampler: str
    scheduler: str

    model: str
    model_family: ModelFamily

    negative_prompt: str = ""
    loras: list[LoraConfig] = Field(default_factory=list)

    quality_preset_used: QualityPresetId | None = None
    hi_res_fix: bool = False
    upscale: bool = False

    sources: ResolutionSources = Field(default_factory=ResolutionSources)
    warnings: list[ResolutionWarning] = Field(default_factory=list)

    @field_validator("width", "height")
    @classmethod
    def snapped_dimension(cls, v: int) -> int:
        if v % DIMENSION_MULTIPLE or not MIN_DIMENSION <= v <= MAX_DIMENSION:
            msg = (
                f"dimension must be a multiple of {DIMENSION_MULTIPLE} in "
                f"[{MIN_DIMENSION}, {MAX_DIMENSION}], got {v}"
            )
            raise ValueError(msg)
        return v

    @property
    def megapixels(self) -> float:
        return self.width * self.height / 1e6

    @property
    def degraded(self) -> bool:
        """Whether any requested value was replaced by a fallback."""
        return bool(self.warnings)
