"""Device-side mirror of a Scene stored in Taichi fields.

Each SceneBuffers instance owns its own SNode tree holding the scene in a
Structure of Arrays layout. Instances are passed to Taichi functions and
kernels as ``ti.template()`` arguments, so several scenes can coexist and no
module-level scene state exists.

The sphere and light counts are plain Python ints on the instance. Kernels
see them as compile-time constants, which keeps the per-object loops tight.
Taichi compiles a kernel once per SceneBuffers instance it is given, so
rendering many scenes of the same shape should upload() into one instance
rather than allocate a new one per scene.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu, default_fp=ti.f64)
    >>> from whitted.scene.buffers import SceneBuffers
    >>> buffers = SceneBuffers(scene)
    >>> # ... launch kernels with buffers as a template argument ...
    >>> buffers.destroy()
"""

import numpy as np
import taichi as ti

from whitted.core.ray import real
from whitted.scene.model import Scene, light_vector


@ti.data_oriented
class SceneBuffers:
    """Taichi fields holding one scene's spheres, lights and background.

    Attributes:
        num_spheres: Number of spheres (compile-time constant in kernels).
        num_lights: Number of lights (compile-time constant in kernels).
        sphere_centers: Sphere centers, vec3 per sphere.
        sphere_radii: Sphere radii.
        sphere_colors: Base colors in [0, 255] space, vec3 per sphere.
        sphere_specular: Specular exponents (0 where absent).
        sphere_has_specular: 1 if the sphere has a specular highlight, else 0.
        sphere_reflective: Reflectivity in [0, 1].
        light_kinds: LightKind code per light.
        light_intensities: Light intensities.
        light_vectors: Position (point) or direction (directional) per light.
        background: Background color, a single vec3 at index 0.
    """

    def __init__(self, scene: Scene) -> None:
        """Allocate fields for a scene and upload its data.

        Args:
            scene: The validated scene to mirror.
        """
        self.scene = scene
        self.num_spheres = scene.sphere_count
        self.num_lights = scene.light_count

        fb = ti.FieldsBuilder()

        self.sphere_centers = ti.Vector.field(3, dtype=real)
        self.sphere_radii = ti.field(dtype=real)
        self.sphere_colors = ti.Vector.field(3, dtype=real)
        self.sphere_specular = ti.field(dtype=real)
        self.sphere_has_specular = ti.field(dtype=ti.i32)
        self.sphere_reflective = ti.field(dtype=real)
        # Zero-sized dense blocks are not allowed; empty lists keep one slot
        fb.dense(ti.i, max(self.num_spheres, 1)).place(
            self.sphere_centers,
            self.sphere_radii,
            self.sphere_colors,
            self.sphere_specular,
            self.sphere_has_specular,
            self.sphere_reflective,
        )

        self.light_kinds = ti.field(dtype=ti.i32)
        self.light_intensities = ti.field(dtype=real)
        self.light_vectors = ti.Vector.field(3, dtype=real)
        fb.dense(ti.i, max(self.num_lights, 1)).place(
            self.light_kinds,
            self.light_intensities,
            self.light_vectors,
        )

        self.background = ti.Vector.field(3, dtype=real)
        fb.dense(ti.i, 1).place(self.background)

        self._snode_tree = fb.finalize()
        self._write(scene)

    def fits(self, scene: Scene) -> bool:
        """Whether a scene has the sphere and light counts of these buffers."""
        return (
            scene.sphere_count == self.num_spheres and scene.light_count == self.num_lights
        )

    def upload(self, scene: Scene) -> None:
        """Replace the mirrored scene with another of the same shape.

        Kernels already compiled for these buffers are reused.

        Raises:
            RuntimeError: If the buffers have been destroyed.
            ValueError: If the scene's sphere or light count differs.
        """
        if self.destroyed:
            raise RuntimeError("SceneBuffers have been destroyed")
        if not self.fits(scene):
            raise ValueError(
                f"Scene with {scene.sphere_count} spheres and {scene.light_count} lights "
                f"does not fit buffers for {self.num_spheres} and {self.num_lights}"
            )
        self._write(scene)
        self.scene = scene

    def _write(self, scene: Scene) -> None:
        """Copy scene records into the fields."""
        n = max(self.num_spheres, 1)
        centers = np.zeros((n, 3), dtype=np.float64)
        radii = np.ones(n, dtype=np.float64)
        colors = np.zeros((n, 3), dtype=np.float64)
        specular = np.zeros(n, dtype=np.float64)
        has_specular = np.zeros(n, dtype=np.int32)
        reflective = np.zeros(n, dtype=np.float64)

        for i, sphere in enumerate(scene.spheres):
            centers[i] = sphere.center
            radii[i] = sphere.radius
            colors[i] = sphere.color
            if sphere.specular is not None:
                specular[i] = sphere.specular
                has_specular[i] = 1
            reflective[i] = sphere.reflective

        self.sphere_centers.from_numpy(centers)
        self.sphere_radii.from_numpy(radii)
        self.sphere_colors.from_numpy(colors)
        self.sphere_specular.from_numpy(specular)
        self.sphere_has_specular.from_numpy(has_specular)
        self.sphere_reflective.from_numpy(reflective)

        m = max(self.num_lights, 1)
        kinds = np.zeros(m, dtype=np.int32)
        intensities = np.zeros(m, dtype=np.float64)
        vectors = np.zeros((m, 3), dtype=np.float64)

        for i, light in enumerate(scene.lights):
            kinds[i] = int(light.kind)
            intensities[i] = light.intensity
            vectors[i] = light_vector(light)

        self.light_kinds.from_numpy(kinds)
        self.light_intensities.from_numpy(intensities)
        self.light_vectors.from_numpy(vectors)

        self.background.from_numpy(np.array([scene.background], dtype=np.float64))

    @property
    def destroyed(self) -> bool:
        """Whether the fields have been released."""
        return self._snode_tree is None

    def destroy(self) -> None:
        """Release the fields. Safe to call more than once."""
        if self._snode_tree is not None:
            self._snode_tree.destroy()
            self._snode_tree = None
