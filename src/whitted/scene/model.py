"""Immutable host-side scene description.

A Scene is an ordered collection of spheres and lights plus a background
color. It is built once per render, validated on construction, and never
mutated afterwards. The renderer mirrors it into Taichi fields (see
whitted.scene.buffers) before any kernel runs.

Lights are explicit variants that only carry the fields their kind uses:

    AmbientLight(intensity)
    PointLight(intensity, position)
    DirectionalLight(intensity, direction)

Example:
    >>> from whitted.scene.model import AmbientLight, PointLight, Scene, Sphere
    >>> scene = Scene(
    ...     spheres=(Sphere(center=(0, 0, 5), radius=1, color=(255, 0, 0)),),
    ...     lights=(AmbientLight(0.2), PointLight(0.6, position=(2, 1, 0))),
    ... )
    >>> scene.sphere_count
    1
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Union

Vec3 = tuple[float, float, float]


class LightKind(IntEnum):
    """Light kind codes as stored on the device."""

    AMBIENT = 0
    POINT = 1
    DIRECTIONAL = 2


def _as_float(value: object, name: str) -> float:
    """Convert a number to float, raising ValueError naming the field."""
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _as_vec3(value: tuple[float, ...] | list[float], name: str) -> Vec3:
    """Convert a 3-sequence to a float tuple, rejecting other arities."""
    try:
        components = tuple(value)
    except TypeError:
        raise ValueError(f"{name} must be a sequence of 3 numbers, got {value!r}") from None
    if len(components) != 3:
        raise ValueError(f"{name} must have exactly 3 components, got {len(components)}")
    x, y, z = (_as_float(v, name) for v in components)
    if not all(math.isfinite(v) for v in (x, y, z)):
        raise ValueError(f"{name} must be finite, got {(x, y, z)}")
    return (x, y, z)


def _check_intensity(intensity: float) -> float:
    intensity = _as_float(intensity, "Light intensity")
    if not intensity >= 0.0:
        raise ValueError(f"Light intensity must be non-negative, got {intensity}")
    return intensity


@dataclass(frozen=True)
class Sphere:
    """A shaded sphere.

    Attributes:
        center: The center point (x, y, z).
        radius: The radius. Must be positive.
        color: Base color (R, G, B), nominally in [0, 255]. Values outside
            that range are allowed; the final pixel is clamped.
        specular: Phong shininess exponent, or None for a surface without a
            specular highlight. Must be positive when given.
        reflective: Fraction of the color taken from the mirror reflection,
            in [0, 1]. 0 is fully matte, 1 is a perfect mirror.
    """

    center: Vec3
    radius: float
    color: Vec3 = (255.0, 255.0, 255.0)
    specular: float | None = None
    reflective: float = 0.0

    def __post_init__(self) -> None:
        object.__setattr__(self, "center", _as_vec3(self.center, "Sphere center"))
        object.__setattr__(self, "color", _as_vec3(self.color, "Sphere color"))

        radius = _as_float(self.radius, "Sphere radius")
        if not radius > 0.0:
            raise ValueError(f"Sphere radius must be positive, got {radius}")
        object.__setattr__(self, "radius", radius)

        if self.specular is not None:
            specular = _as_float(self.specular, "Sphere specular exponent")
            if not specular > 0.0:
                raise ValueError(
                    f"Sphere specular exponent must be positive or None, got {specular}"
                )
            object.__setattr__(self, "specular", specular)

        reflective = _as_float(self.reflective, "Sphere reflectivity")
        if not 0.0 <= reflective <= 1.0:
            raise ValueError(f"Sphere reflectivity must be in [0, 1], got {reflective}")
        object.__setattr__(self, "reflective", reflective)


@dataclass(frozen=True)
class AmbientLight:
    """Light that reaches every surface point unconditionally."""

    intensity: float

    kind = LightKind.AMBIENT

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", _check_intensity(self.intensity))


@dataclass(frozen=True)
class PointLight:
    """Light emitted from a world-space position.

    Attributes:
        intensity: Non-negative intensity.
        position: World position of the light.
    """

    intensity: float
    position: Vec3

    kind = LightKind.POINT

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", _check_intensity(self.intensity))
        object.__setattr__(self, "position", _as_vec3(self.position, "PointLight position"))


@dataclass(frozen=True)
class DirectionalLight:
    """Light arriving from infinitely far away along a fixed direction.

    Attributes:
        intensity: Non-negative intensity.
        direction: Vector pointing from surfaces toward the light. Must be
            non-zero; it does not need to be unit length.
    """

    intensity: float
    direction: Vec3

    kind = LightKind.DIRECTIONAL

    def __post_init__(self) -> None:
        object.__setattr__(self, "intensity", _check_intensity(self.intensity))
        direction = _as_vec3(self.direction, "DirectionalLight direction")
        if direction == (0.0, 0.0, 0.0):
            raise ValueError("DirectionalLight direction must be non-zero")
        object.__setattr__(self, "direction", direction)


Light = Union[AmbientLight, PointLight, DirectionalLight]


def light_vector(light: Light) -> Vec3:
    """Get the position (point) or direction (directional) of a light.

    Ambient lights have no vector; (0, 0, 0) is returned so the device-side
    layout stays uniform.
    """
    if isinstance(light, PointLight):
        return light.position
    if isinstance(light, DirectionalLight):
        return light.direction
    return (0.0, 0.0, 0.0)


@dataclass(frozen=True)
class Scene:
    """Spheres, lights and background for one render.

    Order matters: when two spheres are hit at exactly the same distance the
    one listed first wins.

    Attributes:
        spheres: The spheres, in tie-break order.
        lights: The lights.
        background: Color (R, G, B) returned for rays that hit nothing.
    """

    spheres: tuple[Sphere, ...] = field(default_factory=tuple)
    lights: tuple[Light, ...] = field(default_factory=tuple)
    background: Vec3 = (0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        spheres = tuple(self.spheres)
        for sphere in spheres:
            if not isinstance(sphere, Sphere):
                raise ValueError(f"Scene spheres must be Sphere records, got {sphere!r}")
        lights = tuple(self.lights)
        for light in lights:
            if not isinstance(light, (AmbientLight, PointLight, DirectionalLight)):
                raise ValueError(f"Scene lights must be light records, got {light!r}")
        object.__setattr__(self, "spheres", spheres)
        object.__setattr__(self, "lights", lights)
        object.__setattr__(self, "background", _as_vec3(self.background, "Scene background"))

    @property
    def sphere_count(self) -> int:
        """Get the number of spheres in the scene."""
        return len(self.spheres)

    @property
    def light_count(self) -> int:
        """Get the number of lights in the scene."""
        return len(self.lights)

    def total_ambient(self) -> float:
        """Sum of all ambient light intensities."""
        return sum(light.intensity for light in self.lights if isinstance(light, AmbientLight))
