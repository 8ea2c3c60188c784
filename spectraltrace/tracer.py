"""Ray generation, tracing and shading of a scene of boxes, spheres and point lights."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from itertools import product

from spectraltrace.geometry import (
    F32_DELTA,
    Rotation,
    Vec3,
    hammersley,
    normal_space,
    random_pcg3d,
    ray_aabb_intersection,
    ray_oriented_box_intersection,
    ray_sphere_intersection,
    reflect,
    rotated_box_normal,
)
from spectraltrace.spectrum import Spectrum

NEW_RAY_MAX_BOUNCES = 30
NEW_RAY_POSITION_OFFSET_DISTANCE = 0.00001
SHADOW_RAY_MAX_BOUNCES = 2


@dataclass(frozen=True)
class PixelPos:
    """Position of a pixel on the screen; (0, 0) is the top left."""

    x: int
    y: int


@dataclass(frozen=True)
class Dimensions:
    """Width and height of the rendered frame in pixels."""

    width: int
    height: int


class ShapeKind(Enum):
    """The shape held inside an axis-aligned bounding box."""

    PLAIN_BOX = "plain_box"
    SPHERE = "sphere"
    ROTATED_BOX = "rotated_box"


def _nearest_non_negative(values: Sequence[float]) -> float | None:
    for value in sorted(values):
        if value >= 0.0:
            return value
    return None


def _non_negative(value: float) -> float:
    return value if value > 0.0 else 0.0


def _face_sign(value: float, low: float, high: float) -> float:
    if abs(value - low) < F32_DELTA:
        return -1.0
    if abs(value - high) < F32_DELTA:
        return 1.0
    return 0.0


@dataclass
class Aabb:
    """An axis-aligned bounding box around a shape, together with its material."""

    point_min: Vec3
    point_max: Vec3
    kind: ShapeKind
    reflective_spectrum: Spectrum
    metallic: bool = False
    center: Vec3 | None = None
    dimensions: Vec3 | None = None
    rotation: Rotation | None = None

    @classmethod
    def sphere(cls, center: Vec3, radius: float, spectrum: Spectrum, metallic: bool) -> Aabb:
        """A sphere of the given centre and radius."""
        extent = Vec3(radius, radius, radius)
        return cls(center - extent, center + extent, ShapeKind.SPHERE, spectrum, metallic)

    @classmethod
    def box(
        cls,
        center: Vec3,
        x_length: float,
        y_length: float,
        z_length: float,
        spectrum: Spectrum,
        metallic: bool,
    ) -> Aabb:
        """An axis-aligned box of the given side lengths centred at center."""
        half = Vec3(x_length / 2.0, y_length / 2.0, z_length / 2.0)
        return cls(center - half, center + half, ShapeKind.PLAIN_BOX, spectrum, metallic)

    @classmethod
    def rotated_box(
        cls,
        center: Vec3,
        x_length: float,
        y_length: float,
        z_length: float,
        rotation: Rotation,
        spectrum: Spectrum,
        metallic: bool,
    ) -> Aabb:
        """A box of the given side lengths, rotated about its centre."""
        half = (x_length / 2.0, y_length / 2.0, z_length / 2.0)
        corners = [
            center + rotation.apply(Vec3(sx * half[0], sy * half[1], sz * half[2]))
            for sx, sy, sz in product((-1.0, 1.0), repeat=3)
        ]
        point_min = Vec3(
            min(c.x for c in corners), min(c.y for c in corners), min(c.z for c in corners)
        )
        point_max = Vec3(
            max(c.x for c in corners), max(c.y for c in corners), max(c.z for c in corners)
        )
        return cls(
            point_min,
            point_max,
            ShapeKind.ROTATED_BOX,
            spectrum,
            metallic,
            center=center,
            dimensions=Vec3(x_length, y_length, z_length),
            rotation=rotation,
        )

    def _sphere_center_and_radius(self) -> tuple[Vec3, float]:
        center = (self.point_min + self.point_max) * 0.5
        return center, self.point_max.x - center.x

    def intersect(self, origin: Vec3, direction: Vec3) -> float | None:
        """Ray parameter of the nearest non-negative hit on the shape, or None."""
        if self.kind is ShapeKind.SPHERE:
            center, radius = self._sphere_center_and_radius()
            return _nearest_non_negative(
                ray_sphere_intersection(origin, direction, center, radius)
            )
        if self.kind is ShapeKind.PLAIN_BOX:
            span = ray_aabb_intersection(origin, direction, self.point_min, self.point_max)
            if span is None:
                return None
            near = min(span)
            return near if near >= 0.0 else max(span)
        span = ray_oriented_box_intersection(
            origin, direction, self.center, self.dimensions, self.rotation
        )
        return _nearest_non_negative(span or ())

    def normal_at(self, point: Vec3) -> Vec3:
        """Outward unit normal of the shape at a point on its surface."""
        if self.kind is ShapeKind.SPHERE:
            center, _ = self._sphere_center_and_radius()
            return (point - center).normalize()
        if self.kind is ShapeKind.PLAIN_BOX:
            return Vec3(
                _face_sign(point.x, self.point_min.x, self.point_max.x),
                _face_sign(point.y, self.point_min.y, self.point_max.y),
                _face_sign(point.z, self.point_min.z, self.point_max.z),
            ).normalize()
        return rotated_box_normal(self.center, self.dimensions, self.rotation, point)


@dataclass
class Light:
    """A point light emitting the given spectrum."""

    position: Vec3
    spectrum: Spectrum


@dataclass(frozen=True)
class Camera:
    """A pinhole camera with a vertical field of view in degrees."""

    position: Vec3
    direction: Vec3
    up: Vec3
    fov_y_deg: float


class Ray:
    """A ray shot through the scene; shaders write its result into it."""

    __slots__ = (
        "origin",
        "direction",
        "hit",
        "spectrum",
        "skip_hit_shader",
        "max_bounces",
        "original_pixel_pos",
        "hit_distance",
        "max_hit_distance",
    )

    def __init__(
        self,
        origin: Vec3,
        direction: Vec3,
        max_bounces: int,
        original_pixel_pos: PixelPos,
        example_spectrum: Spectrum,
    ) -> None:
        self.origin = origin
        self.direction = direction.normalize()
        self.hit = False
        self.spectrum = Spectrum.empty_like(example_spectrum)
        self.skip_hit_shader = False
        self.max_bounces = max_bounces
        self.original_pixel_pos = original_pixel_pos
        self.hit_distance = 0.0
        self.max_hit_distance = math.inf

    @classmethod
    def shadow(
        cls,
        origin: Vec3,
        direction: Vec3,
        max_hit_distance: float,
        example_spectrum: Spectrum,
    ) -> Ray:
        """A ray that only records whether anything lies within max_hit_distance."""
        ray = cls(origin, direction, SHADOW_RAY_MAX_BOUNCES, PixelPos(0, 0), example_spectrum)
        ray.skip_hit_shader = True
        ray.max_hit_distance = max_hit_distance
        return ray

    def __repr__(self) -> str:
        return (
            f"Ray(origin={self.origin!r}, direction={self.direction!r}, hit={self.hit!r}, "
            f"max_bounces={self.max_bounces!r})"
        )


@dataclass
class RaytracingUniforms:
    """Data that stays constant during one frame."""

    aabbs: Sequence[Aabb]
    lights: Sequence[Light]
    camera: Camera
    example_spectrum: Spectrum
    frame_id: int = 0
    intended_frames_amount: int = 1


def ray_generation_shader(
    pos: PixelPos, dimensions: Dimensions, uniforms: RaytracingUniforms
) -> tuple[float, float, float]:
    """Trace the camera ray through a pixel and return its linear sRGB colour."""
    width = float(dimensions.width)
    height = float(dimensions.height)
    aspect_ratio = width / height
    camera = uniforms.camera
    fov_half_rad = (camera.fov_y_deg / 2.0) / 180.0 * math.pi
    focal_distance = 1.0 / math.tan(fov_half_rad)

    offset_x, offset_y = hammersley(uniforms.frame_id, uniforms.intended_frames_amount)
    y = -(((pos.y + offset_y) / height) * 2.0 - 1.0)
    x = (((pos.x + offset_x) / width) * 2.0 - 1.0) * aspect_ratio

    up = camera.up.normalize()
    forward = camera.direction.normalize()
    right = forward.cross(up).normalize()
    true_up = right.cross(forward)
    direction = (forward * focal_distance - right * x + true_up * y).normalize()

    ray = Ray(camera.position, direction, NEW_RAY_MAX_BOUNCES, pos, uniforms.example_spectrum)
    submit_ray(ray, uniforms)
    return ray.spectrum.to_rgb()


def submit_ray(ray: Ray, uniforms: RaytracingUniforms) -> None:
    """Trace ray through the scene and run the hit or miss shader on it."""
    nearest: tuple[Aabb, float] | None = None
    for aabb in uniforms.aabbs:
        if ray_aabb_intersection(ray.origin, ray.direction, aabb.point_min, aabb.point_max) is None:
            continue
        t = aabb.intersect(ray.origin, ray.direction)
        if t is not None and t > 0.0 and (nearest is None or t < nearest[1]):
            nearest = (aabb, t)

    if nearest is None:
        _miss_shader(ray)
        return

    aabb, t = nearest
    if t <= ray.max_hit_distance:
        if ray.skip_hit_shader:
            ray.hit = True
        else:
            _hit_shader(ray, aabb, t, uniforms)


def _miss_shader(ray: Ray) -> None:
    ray.spectrum = Spectrum.empty_like(ray.spectrum)
    ray.hit = False


def _hit_shader(ray: Ray, aabb: Aabb, distance: float, uniforms: RaytracingUniforms) -> None:
    ray.hit = True
    ray.hit_distance = distance

    intersection_point = ray.origin + ray.direction * distance
    normal = aabb.normal_at(intersection_point)
    # Secondary rays start slightly off the surface so they do not hit it again.
    offset_origin = intersection_point + normal * NEW_RAY_POSITION_OFFSET_DISTANCE

    received = Spectrum.empty_like(ray.spectrum)

    if aabb.metallic:
        if ray.max_bounces > 1:
            mirrored = Ray(
                offset_origin,
                reflect(ray.direction, normal),
                ray.max_bounces - 1,
                ray.original_pixel_pos,
                ray.spectrum,
            )
            submit_ray(mirrored, uniforms)
            received += mirrored.spectrum
    else:
        # Only direct light is attenuated by distance here; bounced light already was.
        for light in uniforms.lights:
            to_light = light.position - offset_origin
            shadow_ray = Ray.shadow(
                offset_origin, to_light.normalize(), to_light.norm(), ray.spectrum
            )
            submit_ray(shadow_ray, uniforms)
            if not shadow_ray.hit:
                adjusted = light.spectrum / to_light.norm_squared()
                adjusted *= _non_negative(shadow_ray.direction.normalize().dot(normal))
                adjusted *= _non_negative((-ray.direction).dot(normal))
                received += adjusted

        if ray.max_bounces > 1:
            random_x, random_y, _ = random_pcg3d(
                ray.original_pixel_pos.x, ray.original_pixel_pos.y, uniforms.frame_id
            )
            # Cosine-weighted hemisphere sampling: no angle correction needed afterwards.
            theta = math.asin(math.sqrt(random_x))
            phi = 2.0 * math.pi * random_y
            tangent, bitangent, axis = normal_space(normal)
            new_direction = (
                tangent * (math.sin(theta) * math.cos(phi))
                + bitangent * (math.sin(theta) * math.sin(phi))
                + axis * math.cos(theta)
            )
            bounced = Ray(
                intersection_point,
                new_direction,
                ray.max_bounces - 1,
                ray.original_pixel_pos,
                ray.spectrum,
            )
            submit_ray(bounced, uniforms)
            bounced.spectrum.clamp_negative()
            received += bounced.spectrum

    ray.spectrum = aabb.reflective_spectrum * received