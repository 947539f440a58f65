"""Viewport camera: maps canvas pixels to primary rays.

Pixels are addressed by centered canvas coordinates (x, y) with the origin at
the image center and y pointing up. A pixel is first placed on the viewport,
a square of side ``viewport_size`` at distance ``projection_plane_z`` in
front of the camera:

    canvas_to_viewport(x, y) = (x * viewport_size / canvas_width,
                                y * viewport_size / canvas_width,
                                projection_plane_z)

The viewport point is then rotated by the camera orientation. Only the
direction is rotated; the camera position becomes the ray origin.

Both coordinates are scaled by the canvas width, so non-square canvases keep
square pixels and see a taller or shorter slice of the scene.

Example:
    >>> from whitted.camera.viewport import Camera, RenderSettings
    >>> camera = Camera.from_yaw(position=(3.0, 2.0, -7.0), degrees=-20.0)
    >>> settings = RenderSettings(canvas_width=600, canvas_height=600)
"""

import math
from dataclasses import dataclass

import numpy as np
import taichi as ti

from whitted.core.ray import mat3, mat_mul3, real, vec2, vec3

Vec3 = tuple[float, float, float]
Mat3 = tuple[Vec3, Vec3, Vec3]

IDENTITY: Mat3 = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))

# Tolerance used when checking that an orientation is a rotation
ORTHONORMAL_TOLERANCE = 1e-4


def _as_array(value, name):
    try:
        return np.asarray(value, dtype=np.float64)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be numeric, got {value!r}") from None


def _as_number(kind, value, name):
    try:
        return kind(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


# =============================================================================
# Camera and Render Configuration
# =============================================================================


@dataclass(frozen=True)
class Camera:
    """Camera position and orientation.

    Attributes:
        position: Camera position in world space (x, y, z).
        orientation: 3x3 rotation matrix as rows. Applied to viewport
            directions; the identity looks down +z with +y up.
    """

    position: Vec3 = (0.0, 0.0, 0.0)
    orientation: Mat3 = IDENTITY

    def __post_init__(self) -> None:
        position = _as_array(self.position, "Camera position")
        if position.shape != (3,) or not np.all(np.isfinite(position)):
            raise ValueError(f"Camera position must be 3 finite numbers, got {self.position}")

        m = _as_array(self.orientation, "Camera orientation")
        if m.shape != (3, 3) or not np.all(np.isfinite(m)):
            raise ValueError(f"Camera orientation must be a 3x3 matrix, got {self.orientation}")
        if not np.allclose(m @ m.T, np.eye(3), atol=ORTHONORMAL_TOLERANCE):
            raise ValueError("Camera orientation must be orthonormal")

        object.__setattr__(self, "position", tuple(float(v) for v in position))
        object.__setattr__(
            self, "orientation", tuple(tuple(float(v) for v in row) for row in m)
        )

    @classmethod
    def from_yaw(cls, position: Vec3, degrees: float) -> "Camera":
        """Create a camera rotated about the world y axis.

        Args:
            position: Camera position.
            degrees: Rotation angle in degrees. Positive angles turn the view
                direction from +z toward +x (matrix rows [cos, 0, sin],
                [0, 1, 0], [-sin, 0, cos]).

        Returns:
            A Camera with the given yaw.
        """
        theta = math.radians(degrees)
        c = math.cos(theta)
        s = math.sin(theta)
        orientation = ((c, 0.0, s), (0.0, 1.0, 0.0), (-s, 0.0, c))
        return cls(position=position, orientation=orientation)

    @classmethod
    def look_at(
        cls,
        position: Vec3,
        target: Vec3,
        up: Vec3 = (0.0, 1.0, 0.0),
    ) -> "Camera":
        """Create a camera at ``position`` facing ``target``.

        Builds the orthonormal basis the same way a pinhole camera does, with
        the viewport's +z mapped to the viewing direction.

        Raises:
            ValueError: If position equals target or ``up`` is parallel to
                the viewing direction.
        """
        eye = np.asarray(position, dtype=np.float64)
        forward = np.asarray(target, dtype=np.float64) - eye
        norm = np.linalg.norm(forward)
        if norm == 0.0:
            raise ValueError("Camera target must differ from its position")
        forward = forward / norm

        # right = up x forward keeps +x to the right for a +y up, +z forward frame
        right = np.cross(np.asarray(up, dtype=np.float64), forward)
        norm = np.linalg.norm(right)
        if norm < 1e-12:
            raise ValueError("Camera up vector must not be parallel to the view direction")
        right = right / norm
        true_up = np.cross(forward, right)

        # Columns are the images of the viewport axes
        orientation = np.column_stack((right, true_up, forward))
        return cls(position=position, orientation=tuple(map(tuple, orientation)))

    def view_direction(self) -> Vec3:
        """Get the world direction of the viewport center."""
        m = np.asarray(self.orientation)
        return tuple(float(v) for v in m @ np.array([0.0, 0.0, 1.0]))


@dataclass(frozen=True)
class RenderSettings:
    """Canvas and projection configuration for one render.

    Attributes:
        canvas_width: Image width in pixels.
        canvas_height: Image height in pixels.
        viewport_size: Side length of the viewport in world units.
        projection_plane_z: Distance from the camera to the viewport.
        max_depth: Reflection recursion budget for primary rays.
    """

    canvas_width: int = 600
    canvas_height: int = 600
    viewport_size: float = 1.0
    projection_plane_z: float = 1.0
    max_depth: int = 3

    def __post_init__(self) -> None:
        width = _as_number(int, self.canvas_width, "canvas_width")
        height = _as_number(int, self.canvas_height, "canvas_height")
        viewport_size = _as_number(float, self.viewport_size, "viewport_size")
        plane_z = _as_number(float, self.projection_plane_z, "projection_plane_z")
        max_depth = _as_number(int, self.max_depth, "max_depth")

        if width <= 0 or height <= 0:
            raise ValueError(f"Canvas dimensions must be positive, got {width}x{height}")
        if not viewport_size > 0.0:
            raise ValueError(f"Viewport size must be positive, got {viewport_size}")
        if not plane_z > 0.0:
            raise ValueError(f"Projection plane distance must be positive, got {plane_z}")
        if max_depth < 0:
            raise ValueError(f"Recursion depth must be non-negative, got {max_depth}")

        object.__setattr__(self, "canvas_width", width)
        object.__setattr__(self, "canvas_height", height)
        object.__setattr__(self, "viewport_size", viewport_size)
        object.__setattr__(self, "projection_plane_z", plane_z)
        object.__setattr__(self, "max_depth", max_depth)

    def x_range(self) -> range:
        """Centered x coordinates of the canvas, left to right."""
        return range(-(self.canvas_width // 2), self.canvas_width - self.canvas_width // 2)

    def y_range(self) -> range:
        """Centered y coordinates of the canvas, bottom to top."""
        return range(-(self.canvas_height // 2), self.canvas_height - self.canvas_height // 2)


def camera_position_vec(camera: Camera) -> vec3:
    """Convert the camera position to a Taichi vector for kernel arguments."""
    return vec3(*camera.position)


def camera_rotation_mat(camera: Camera) -> mat3:
    """Convert the camera orientation to a Taichi matrix for kernel arguments."""
    return mat3([list(row) for row in camera.orientation])


# =============================================================================
# Ray Generation (Taichi-compatible)
# =============================================================================


@ti.func
def canvas_to_viewport(
    x: real,
    y: real,
    canvas_width: real,
    viewport_size: real,
    projection_plane_z: real,
) -> vec3:
    """Place centered canvas coordinates on the viewport plane.

    Args:
        x: Centered x coordinate (0 at the image center, + to the right).
        y: Centered y coordinate (0 at the image center, + up).
        canvas_width: Canvas width in pixels.
        viewport_size: Viewport side length.
        projection_plane_z: Distance of the viewport from the camera.

    Returns:
        The viewport point in camera space.
    """
    return vec3(
        x * viewport_size / canvas_width,
        y * viewport_size / canvas_width,
        projection_plane_z,
    )


@ti.func
def primary_ray_direction(
    x: real,
    y: real,
    canvas_width: real,
    viewport_size: real,
    projection_plane_z: real,
    rotation: mat3,
) -> vec3:
    """Compute the world-space direction of the primary ray through a pixel.

    The direction is not normalized: at the image center its length equals
    the projection plane distance.
    """
    return mat_mul3(
        rotation,
        canvas_to_viewport(x, y, canvas_width, viewport_size, projection_plane_z),
    )


@ti.func
def pixel_to_canvas(i: ti.i32, j: ti.i32, width: ti.i32, height: ti.i32) -> vec2:
    """Convert buffer indices (0 = left/bottom) to centered canvas coordinates."""
    return vec2(ti.cast(i - width // 2, real), ti.cast(j - height // 2, real))
