"""JSON render configuration documents.

A render configuration bundles everything one render needs: settings,
background, camera, spheres and lights. Documents look like::

    {
      "settings": {"canvas_width": 600, "canvas_height": 600,
                   "viewport_size": 1, "projection_plane_z": 1,
                   "max_depth": 3},
      "background": [0, 0, 0],
      "camera": {"position": [3, 2, -7], "yaw_degrees": -20},
      "spheres": [{"center": [0, -1, 3], "radius": 1, "color": [255, 0, 0],
                   "specular": 500, "reflective": 0.2}],
      "lights": [{"type": "ambient", "intensity": 0.2},
                 {"type": "point", "intensity": 0.6, "position": [2, 1, 0]},
                 {"type": "directional", "intensity": 0.2,
                  "direction": [1, 4, 4]}]
    }

The camera takes either ``yaw_degrees`` or a 3x3 ``orientation`` (rows); with
neither it looks down +z. A missing or null ``specular`` means the sphere has
no highlight. Every record is validated while parsing, so a bad document
raises ValueError before anything is rendered.

Example:
    >>> from whitted.scene.config import load_render_config
    >>> scene, camera, settings = load_render_config("scenes/demo.json")
"""

from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path
from typing import Any

from whitted.camera.viewport import Camera, RenderSettings
from whitted.scene.model import (
    AmbientLight,
    DirectionalLight,
    Light,
    PointLight,
    Scene,
    Sphere,
)

_LIGHT_TYPES = ("ambient", "point", "directional")


def _require(data: dict[str, Any], key: str, where: str) -> Any:
    if key not in data:
        raise ValueError(f"{where} is missing required field '{key}'")
    return data[key]


def _record(value: Any, where: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise ValueError(f"{where} must be an object, got {value!r}")
    return value


def _list(value: Any, where: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValueError(f"{where} must be a list, got {value!r}")
    return value


def _vector(value: Any, where: str) -> tuple[float, ...]:
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"{where} must be a list of 3 numbers, got {value!r}")
    return tuple(value)


def _number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{where} must be a number, got {value!r}")
    return float(value)


def _build(where: str, factory, *args, **kwargs):
    """Construct a record, prefixing validation errors with the document path."""
    try:
        return factory(*args, **kwargs)
    except ValueError as e:
        raise ValueError(f"{where}: {e}") from e


def _parse_sphere(data: Any, index: int) -> Sphere:
    where = f"spheres[{index}]"
    data = _record(data, where)
    return _build(
        where,
        Sphere,
        center=_vector(_require(data, "center", where), f"{where}.center"),
        radius=_require(data, "radius", where),
        color=_vector(data.get("color", (255, 255, 255)), f"{where}.color"),
        specular=data.get("specular"),
        reflective=data.get("reflective", 0.0),
    )


def _parse_light(data: Any, index: int) -> Light:
    where = f"lights[{index}]"
    data = _record(data, where)
    light_type = str(_require(data, "type", where)).lower()
    intensity = _require(data, "intensity", where)

    if light_type == "ambient":
        return _build(where, AmbientLight, intensity)
    elif light_type == "point":
        position = _vector(_require(data, "position", where), f"{where}.position")
        return _build(where, PointLight, intensity, position=position)
    elif light_type == "directional":
        direction = _vector(_require(data, "direction", where), f"{where}.direction")
        return _build(where, DirectionalLight, intensity, direction=direction)
    else:
        raise ValueError(f"{where} has unknown light type '{light_type}' (expected {_LIGHT_TYPES})")


def _parse_camera(data: Any) -> Camera:
    data = _record(data, "camera")
    position = _vector(data.get("position", (0.0, 0.0, 0.0)), "camera.position")
    if "orientation" in data and "yaw_degrees" in data:
        raise ValueError("camera must give either 'orientation' or 'yaw_degrees', not both")
    if "yaw_degrees" in data:
        yaw = _number(data["yaw_degrees"], "camera.yaw_degrees")
        return _build("camera", Camera.from_yaw, position, yaw)
    if "orientation" in data:
        rows = _list(data["orientation"], "camera.orientation")
        orientation = tuple(
            _vector(row, f"camera.orientation[{i}]") for i, row in enumerate(rows)
        )
        return _build("camera", Camera, position=position, orientation=orientation)
    return _build("camera", Camera, position=position)


def parse_render_config(data: dict[str, Any]) -> tuple[Scene, Camera, RenderSettings]:
    """Build validated render records from a configuration dictionary.

    Error messages name the offending field by its path in the document,
    e.g. ``spheres[2]: Sphere radius must be a number, got None``.

    Args:
        data: A decoded configuration document.

    Returns:
        A tuple of (Scene, Camera, RenderSettings).

    Raises:
        ValueError: If any field is missing, of the wrong type or invalid.
    """
    data = _record(data, "configuration")
    settings_data = _record(data.get("settings", {}), "settings")
    unknown = set(settings_data) - set(RenderSettings.__dataclass_fields__)
    if unknown:
        raise ValueError(f"settings has unknown fields: {sorted(unknown)}")
    settings = _build("settings", RenderSettings, **settings_data)

    spheres = tuple(
        _parse_sphere(s, i) for i, s in enumerate(_list(data.get("spheres", []), "spheres"))
    )
    lights = tuple(
        _parse_light(light, i) for i, light in enumerate(_list(data.get("lights", []), "lights"))
    )
    scene = _build(
        "background",
        Scene,
        spheres=spheres,
        lights=lights,
        background=_vector(data.get("background", (0.0, 0.0, 0.0)), "background"),
    )

    camera = _parse_camera(data.get("camera", {}))
    return scene, camera, settings


def _light_to_dict(light: Light) -> dict[str, Any]:
    if isinstance(light, PointLight):
        return {"type": "point", "intensity": light.intensity, "position": list(light.position)}
    if isinstance(light, DirectionalLight):
        return {
            "type": "directional",
            "intensity": light.intensity,
            "direction": list(light.direction),
        }
    return {"type": "ambient", "intensity": light.intensity}


def render_config_to_dict(
    scene: Scene,
    camera: Camera,
    settings: RenderSettings,
) -> dict[str, Any]:
    """Export render records to a JSON-serializable dictionary.

    The camera is written with its full orientation matrix.
    """
    return {
        "settings": asdict(settings),
        "background": list(scene.background),
        "camera": {
            "position": list(camera.position),
            "orientation": [list(row) for row in camera.orientation],
        },
        "spheres": [
            {
                "center": list(sphere.center),
                "radius": sphere.radius,
                "color": list(sphere.color),
                "specular": sphere.specular,
                "reflective": sphere.reflective,
            }
            for sphere in scene.spheres
        ],
        "lights": [_light_to_dict(light) for light in scene.lights],
    }


def load_render_config(path: str | Path) -> tuple[Scene, Camera, RenderSettings]:
    """Load a render configuration from a JSON file.

    Raises:
        ValueError: If the document is not valid JSON or has invalid fields.
        OSError: If the file cannot be read.
    """
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise ValueError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a JSON object")
    return parse_render_config(data)


def save_render_config(
    path: str | Path,
    scene: Scene,
    camera: Camera,
    settings: RenderSettings,
) -> None:
    """Write render records to a JSON file."""
    data = render_config_to_dict(scene, camera, settings)
    Path(path).write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
