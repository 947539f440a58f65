"""Frame driver: primary rays for every pixel, traced and clamped.

For each pixel at centered canvas coordinates (x, y) the renderer builds the
primary ray through the viewport, rotates it by the camera orientation, traces
it from the camera position over (1, inf) with the configured recursion
budget, and stores the color clamped to [0, 255].

The render kernel's outer loop runs in parallel over pixels. Every pixel is a
pure function of the scene, the camera and its own coordinates, and writes
only its own cell of the frame buffer. The frame can be processed in
horizontal bands of rows to report progress between kernel launches.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.core.renderer import Renderer
    >>> from whitted.scene.presets import create_demo_scene
    >>>
    >>> scene, camera, settings = create_demo_scene()
    >>> with Renderer(scene, camera, settings) as renderer:
    ...     frame = renderer.render()
    >>> frame.pixel(0, 0)  # color at the image center
"""

from collections.abc import Callable, Iterator

import numpy as np
import numpy.typing as npt
import taichi as ti

from whitted.camera.viewport import (
    Camera,
    RenderSettings,
    camera_position_vec,
    camera_rotation_mat,
    pixel_to_canvas,
    primary_ray_direction,
)
from whitted.core.ray import INF, clamp_color, make_ray, mat3, real, vec3
from whitted.core.tracer import trace_ray
from whitted.scene.buffers import SceneBuffers
from whitted.scene.model import Scene

# Primary rays start at the projection plane, one direction-length away
PRIMARY_T_MIN = 1.0

# Type alias for progress callback
# Callback receives (rows_completed, total_rows)
ProgressCallback = Callable[[int, int], None]

# Type alias for pixel sinks
# Sink receives (x, y, (r, g, b)) in centered canvas coordinates
PixelSink = Callable[[int, int, tuple[float, float, float]], None]


# =============================================================================
# Rendering Kernels
# =============================================================================


@ti.func
def _shade_pixel(
    scene: ti.template(),
    i: ti.i32,
    j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    viewport_size: real,
    projection_plane_z: real,
    max_depth: ti.i32,
    camera_position: vec3,
    camera_rotation: mat3,
) -> vec3:
    """Trace the primary ray of buffer cell (i, j) and clamp the result."""
    xy = pixel_to_canvas(i, j, width, height)
    direction = primary_ray_direction(
        xy.x,
        xy.y,
        ti.cast(width, real),
        viewport_size,
        projection_plane_z,
        camera_rotation,
    )
    primary = make_ray(camera_position, direction)
    color = trace_ray(scene, primary, PRIMARY_T_MIN, INF, max_depth)
    return clamp_color(color)


@ti.kernel
def _render_rows(
    scene: ti.template(),
    image: ti.types.ndarray(dtype=vec3, ndim=2),
    width: ti.i32,
    height: ti.i32,
    row_start: ti.i32,
    row_end: ti.i32,
    viewport_size: real,
    projection_plane_z: real,
    max_depth: ti.i32,
    camera_position: vec3,
    camera_rotation: mat3,
):
    """Render buffer rows [row_start, row_end) into the image array.

    Args:
        scene: SceneBuffers to trace against.
        image: Output array indexed [i, j], i = column (0 = left),
            j = row (0 = bottom).
        width: Canvas width in pixels.
        height: Canvas height in pixels.
        row_start: First row to render.
        row_end: One past the last row to render.
        viewport_size: Viewport side length.
        projection_plane_z: Viewport distance from the camera.
        max_depth: Reflection recursion budget.
        camera_position: Ray origin.
        camera_rotation: Camera orientation matrix.
    """
    for i, j in ti.ndrange(width, (row_start, row_end)):
        image[i, j] = _shade_pixel(
            scene,
            i,
            j,
            width,
            height,
            viewport_size,
            projection_plane_z,
            max_depth,
            camera_position,
            camera_rotation,
        )


@ti.kernel
def _render_single_pixel(
    scene: ti.template(),
    i: ti.i32,
    j: ti.i32,
    width: ti.i32,
    height: ti.i32,
    viewport_size: real,
    projection_plane_z: real,
    max_depth: ti.i32,
    camera_position: vec3,
    camera_rotation: mat3,
) -> vec3:
    """Render one buffer cell. Used for testing and debugging."""
    return _shade_pixel(
        scene,
        i,
        j,
        width,
        height,
        viewport_size,
        projection_plane_z,
        max_depth,
        camera_position,
        camera_rotation,
    )


# =============================================================================
# Frame
# =============================================================================


class Frame:
    """A rendered image with colors clamped to [0, 255].

    The buffer is stored the way the kernel writes it: shape (width, height, 3)
    indexed [column, row] with row 0 at the bottom. Use pixel() for centered
    coordinates and to_numpy() for a conventional top-down image.

    Attributes:
        settings: The render settings the frame was produced with.
    """

    def __init__(self, buffer: npt.NDArray[np.floating], settings: RenderSettings) -> None:
        expected = (settings.canvas_width, settings.canvas_height, 3)
        if buffer.shape != expected:
            raise ValueError(f"Frame buffer shape {buffer.shape} does not match {expected}")
        self._buffer = buffer
        self.settings = settings

    @property
    def width(self) -> int:
        return self.settings.canvas_width

    @property
    def height(self) -> int:
        return self.settings.canvas_height

    @property
    def buffer(self) -> npt.NDArray[np.floating]:
        """Get the raw (width, height, 3) buffer."""
        return self._buffer

    def pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Get the color at centered canvas coordinates.

        Args:
            x: Centered x coordinate (0 = image center, + right).
            y: Centered y coordinate (0 = image center, + up).

        Raises:
            IndexError: If (x, y) lies outside the canvas.
        """
        i = x + self.width // 2
        j = y + self.height // 2
        if not (0 <= i < self.width and 0 <= j < self.height):
            raise IndexError(f"Pixel ({x}, {y}) is outside the {self.width}x{self.height} canvas")
        r, g, b = self._buffer[i, j]
        return (float(r), float(g), float(b))

    def pixels(self) -> Iterator[tuple[int, int, tuple[float, float, float]]]:
        """Iterate (x, y, color) over every pixel, column by column."""
        for x in self.settings.x_range():
            for y in self.settings.y_range():
                yield x, y, self.pixel(x, y)

    def emit(self, sink: PixelSink) -> None:
        """Send every pixel to a sink as (x, y, color)."""
        for x, y, color in self.pixels():
            sink(x, y, color)

    def to_numpy(self) -> npt.NDArray[np.float32]:
        """Get the image as a (height, width, 3) float32 array, top row first."""
        # Transpose from (width, height, 3) to (height, width, 3)
        image = np.transpose(self._buffer, (1, 0, 2))
        # Flip vertically (row 0 is the bottom of the canvas)
        return np.ascontiguousarray(np.flipud(image), dtype=np.float32)

    def to_uint8(self) -> npt.NDArray[np.uint8]:
        """Get the image as a (height, width, 3) uint8 array."""
        from whitted.preview.export import image_to_uint8

        return image_to_uint8(self.to_numpy())

    def __repr__(self) -> str:
        return f"Frame(width={self.width}, height={self.height})"


# =============================================================================
# Renderer
# =============================================================================


class Renderer:
    """Renders one scene from one camera.

    The scene is uploaded to Taichi fields once on construction and reused for
    every call. Kernels are compiled per set of scene fields, so use
    set_scene() to swap in another scene of the same shape without
    recompiling. Call close() (or use the renderer as a context manager) to
    release the fields.

    Attributes:
        scene: The scene being rendered.
        camera: The camera.
        settings: Canvas and projection settings.
    """

    def __init__(
        self,
        scene: Scene,
        camera: Camera | None = None,
        settings: RenderSettings | None = None,
    ) -> None:
        """Initialize the renderer.

        Args:
            scene: The validated scene.
            camera: The camera. Defaults to the origin looking down +z.
            settings: Render settings. Defaults to RenderSettings().
        """
        self.scene = scene
        self.camera = camera if camera is not None else Camera()
        self.settings = settings if settings is not None else RenderSettings()
        self._buffers: SceneBuffers | None = SceneBuffers(scene)

    def _check_open(self) -> SceneBuffers:
        """Get the scene buffers, raising if the renderer was closed."""
        if self._buffers is None:
            raise RuntimeError("Renderer has been closed")
        return self._buffers

    def set_scene(self, scene: Scene) -> None:
        """Replace the scene being rendered.

        A scene with the same sphere and light counts is uploaded into the
        current fields and reuses the compiled kernels. Any other scene gets
        new fields.

        Raises:
            RuntimeError: If the renderer has been closed.
        """
        buffers = self._check_open()
        if buffers.fits(scene):
            buffers.upload(scene)
        else:
            replacement = SceneBuffers(scene)
            buffers.destroy()
            self._buffers = replacement
        self.scene = scene

    def _view_args(self) -> tuple:
        s = self.settings
        return (
            s.viewport_size,
            s.projection_plane_z,
            s.max_depth,
            camera_position_vec(self.camera),
            camera_rotation_mat(self.camera),
        )

    def render(
        self,
        band_rows: int | None = None,
        callback: ProgressCallback | None = None,
    ) -> Frame:
        """Render the full frame.

        Args:
            band_rows: Number of rows per kernel launch. None renders the
                whole frame in one launch.
            callback: Optional callback called after each band with
                (rows_completed, total_rows).

        Returns:
            The rendered Frame.

        Raises:
            RuntimeError: If the renderer has been closed.
            ValueError: If band_rows is not positive.
        """
        buffers = self._check_open()

        width = self.settings.canvas_width
        height = self.settings.canvas_height
        if band_rows is None:
            band_rows = height
        if band_rows <= 0:
            raise ValueError(f"band_rows must be positive, got {band_rows}")

        image = np.zeros((width, height, 3), dtype=np.float64)
        view_args = self._view_args()

        row = 0
        while row < height:
            row_end = min(row + band_rows, height)
            _render_rows(buffers, image, width, height, row, row_end, *view_args)
            row = row_end

            if callback is not None:
                callback(row, height)

        return Frame(image, self.settings)

    def render_pixel(self, x: int, y: int) -> tuple[float, float, float]:
        """Render a single pixel at centered canvas coordinates.

        This is a Python-callable function for testing. For full images use
        render(), which processes all pixels in parallel.

        Returns:
            Tuple of clamped (R, G, B).

        Raises:
            RuntimeError: If the renderer has been closed.
        """
        buffers = self._check_open()

        width = self.settings.canvas_width
        height = self.settings.canvas_height
        color = _render_single_pixel(
            buffers, x + width // 2, y + height // 2, width, height, *self._view_args()
        )
        return (float(color[0]), float(color[1]), float(color[2]))

    def close(self) -> None:
        """Release the scene fields. Safe to call more than once."""
        if self._buffers is not None:
            self._buffers.destroy()
            self._buffers = None

    @property
    def closed(self) -> bool:
        return self._buffers is None

    def __enter__(self) -> "Renderer":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def __repr__(self) -> str:
        """Return a string representation of the renderer state."""
        return (
            f"Renderer(width={self.settings.canvas_width}, "
            f"height={self.settings.canvas_height}, "
            f"spheres={self.scene.sphere_count}, lights={self.scene.light_count})"
        )


def render(
    scene: Scene,
    camera: Camera | None = None,
    settings: RenderSettings | None = None,
    *,
    sink: PixelSink | None = None,
    band_rows: int | None = None,
    callback: ProgressCallback | None = None,
) -> Frame:
    """Render a scene once and release its device resources.

    Configuration is validated when the Scene, Camera and RenderSettings are
    constructed, so an invalid configuration fails before any pixel is
    computed.

    Args:
        scene: The scene.
        camera: The camera (defaults to the origin looking down +z).
        settings: Render settings (defaults to RenderSettings()).
        sink: Optional pixel sink. Every pixel is emitted to it once the
            frame is complete.
        band_rows: Rows per kernel launch (see Renderer.render).
        callback: Progress callback (see Renderer.render).

    Returns:
        The rendered Frame.
    """
    with Renderer(scene, camera, settings) as renderer:
        frame = renderer.render(band_rows=band_rows, callback=callback)

    if sink is not None:
        frame.emit(sink)

    return frame
