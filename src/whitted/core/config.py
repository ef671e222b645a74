"""Render configuration.

RenderConfig is an immutable value passed to every render call. Interactive
controls never mutate it in place; they build a new one with
dataclasses.replace() (see Renderer.update_config) between renders.

Example:
    >>> from whitted.core.config import RenderConfig
    >>> config = RenderConfig(max_depth=3, specular_enabled=False)
    >>> config.max_depth
    3
"""

from dataclasses import dataclass

# =============================================================================
# Defaults
# =============================================================================

DEFAULT_MAX_DEPTH = 1

# Pale blue-grey
DEFAULT_BACKGROUND_COLOR = (190.0 / 255.0, 210.0 / 255.0, 215.0 / 255.0)

# Offset applied to hit points against self-intersection
DEFAULT_BIAS = 0.001

# Upper bound on max_depth; keeps a runaway slider from stalling a render
MAX_DEPTH_LIMIT = 64


@dataclass(frozen=True)
class RenderConfig:
    """Parameters read by every trace and shade call during a render.

    Attributes:
        max_depth: Number of mirror bounces allowed after the primary hit.
        background_color: Color returned by a trace started beyond max_depth.
        ambient_enabled: Include the ambient term in local shading.
        diffuse_enabled: Include the diffuse term in local shading.
        specular_enabled: Include the specular term in local shading.
        reflection_enabled: Follow mirror reflections.
        bias: Distance hit points are pulled back along their ray (> 0).
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    background_color: tuple[float, float, float] = DEFAULT_BACKGROUND_COLOR
    ambient_enabled: bool = True
    diffuse_enabled: bool = True
    specular_enabled: bool = True
    reflection_enabled: bool = True
    bias: float = DEFAULT_BIAS

    def __post_init__(self) -> None:
        """Validate the configuration.

        Raises:
            ValueError: If max_depth is outside [0, MAX_DEPTH_LIMIT], bias is
                not positive, or background_color is not three components.
        """
        if not 0 <= self.max_depth <= MAX_DEPTH_LIMIT:
            raise ValueError(
                f"max_depth must be in [0, {MAX_DEPTH_LIMIT}], got {self.max_depth}"
            )
        if self.bias <= 0.0:
            raise ValueError(f"bias must be positive, got {self.bias}")
        if len(self.background_color) != 3:
            raise ValueError(
                f"background_color must have 3 components, got {self.background_color}"
            )
