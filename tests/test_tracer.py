import math

import pytest

from spectraltrace.geometry import Rotation, Vec3
from spectraltrace.spectrum import Spectrum
from spectraltrace.tracer import (
    Aabb,
    Camera,
    Dimensions,
    Light,
    PixelPos,
    Ray,
    RaytracingUniforms,
    ShapeKind,
    ray_generation_shader,
    submit_ray,
)


def _flat(value, count=8):
    return Spectrum.flat(380.0, 780.0, count, value)


def _camera():
    return Camera(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0), Vec3(0.0, 1.0, 0.0), 60.0)


def _uniforms(aabbs, lights, count=8):
    return RaytracingUniforms(
        aabbs=aabbs, lights=lights, camera=_camera(), example_spectrum=_flat(0.0, count)
    )


def _primary(origin, direction, bounces=1):
    return Ray(origin, direction, bounces, PixelPos(0, 0), _flat(0.0))


def test_sphere_bounds_and_kind():
    center = Vec3(1.0, 2.0, 3.0)
    radius = 0.5
    sphere = Aabb.sphere(center, radius, _flat(1.0), False)
    extent = Vec3(radius, radius, radius)
    assert sphere.point_min == center - extent
    assert sphere.point_max == center + extent
    assert sphere.kind is ShapeKind.SPHERE
    assert sphere.metallic is False


def test_box_bounds():
    center = Vec3(0.0, 1.0, -2.0)
    box = Aabb.box(center, 2.0, 4.0, 6.0, _flat(1.0), True)
    assert box.point_min == center - Vec3(1.0, 2.0, 3.0)
    assert box.point_max == center + Vec3(1.0, 2.0, 3.0)
    assert box.kind is ShapeKind.PLAIN_BOX
    assert box.metallic is True


def test_rotated_box_with_identity_matches_plain_box():
    center = Vec3(1.0, -1.0, 2.0)
    plain = Aabb.box(center, 2.0, 4.0, 6.0, _flat(1.0), False)
    rotated = Aabb.rotated_box(center, 2.0, 4.0, 6.0, Rotation(), _flat(1.0), False)
    assert tuple(rotated.point_min) == pytest.approx(tuple(plain.point_min))
    assert tuple(rotated.point_max) == pytest.approx(tuple(plain.point_max))
    assert rotated.kind is ShapeKind.ROTATED_BOX
    assert rotated.dimensions == Vec3(2.0, 4.0, 6.0)


def test_rotated_box_quarter_turn_swaps_extents():
    center = Vec3(0.0, 0.0, 0.0)
    plain = Aabb.box(center, 2.0, 4.0, 6.0, _flat(1.0), False)
    turn = Rotation.from_euler_angles(0.0, 0.0, math.pi / 2)
    rotated = Aabb.rotated_box(center, 2.0, 4.0, 6.0, turn, _flat(1.0), False)
    assert rotated.point_max.x == pytest.approx(plain.point_max.y)
    assert rotated.point_max.y == pytest.approx(plain.point_max.x)
    assert rotated.point_max.z == pytest.approx(plain.point_max.z)
    assert rotated.point_min.x == pytest.approx(plain.point_min.y)


@pytest.mark.parametrize(
    "origin, direction",
    [
        (Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0)),
        (Vec3(4.0, 3.0, 0.0), Vec3(-4.0, -3.0, 0.0)),
        (Vec3(-3.0, 0.5, -3.0), Vec3(1.0, 0.0, 1.0)),
    ],
)
def test_sphere_hit_lies_on_surface(origin, direction):
    center = Vec3(0.0, 0.0, 0.0)
    radius = 1.0
    sphere = Aabb.sphere(center, radius, _flat(1.0), False)
    unit = direction.normalize()
    t = sphere.intersect(origin, unit)
    assert t is not None and t > 0.0
    point = origin + unit * t
    assert (point - center).norm() == pytest.approx(radius)
    # The nearer root is taken: the hit faces the ray.
    assert sphere.normal_at(point).dot(unit) < 0.0


def test_sphere_hit_from_inside_uses_far_root():
    radius = 2.0
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), radius, _flat(1.0), False)
    t = sphere.intersect(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0))
    assert t == pytest.approx(radius)


def test_sphere_behind_ray_is_missed():
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    assert sphere.intersect(Vec3(0.0, 0.0, 5.0), Vec3(0.0, 0.0, 1.0)) is None


def test_plain_box_normal_faces_incoming_ray():
    box = Aabb.box(Vec3(0.0, 0.0, 0.0), 2.0, 2.0, 2.0, _flat(1.0), False)
    origin = Vec3(0.0, 0.0, -5.0)
    direction = Vec3(0.0, 0.0, 1.0)
    t = box.intersect(origin, direction)
    assert t is not None
    point = origin + direction * t
    assert point.z == pytest.approx(box.point_min.z)
    assert box.normal_at(point) == -direction


def test_rotated_box_normal_faces_incoming_ray():
    turn = Rotation.from_euler_angles(0.0, 0.0, math.pi / 2)
    box = Aabb.rotated_box(Vec3(0.0, 0.0, 0.0), 2.0, 4.0, 2.0, turn, _flat(1.0), False)
    origin = Vec3(-5.0, 0.0, 0.0)
    direction = Vec3(1.0, 0.0, 0.0)
    t = box.intersect(origin, direction)
    assert t is not None
    point = origin + direction * t
    assert point.x == pytest.approx(box.point_min.x)
    normal = box.normal_at(point)
    assert normal.dot(direction) == pytest.approx(-1.0)


def test_sphere_normal_is_unit_and_radial():
    center = Vec3(1.0, 1.0, 1.0)
    sphere = Aabb.sphere(center, 2.0, _flat(1.0), False)
    point = center + Vec3(0.0, 2.0, 0.0)
    normal = sphere.normal_at(point)
    assert normal.norm() == pytest.approx(1.0)
    assert normal.cross(point - center).norm() == pytest.approx(0.0)


def test_ray_normalizes_direction_and_starts_black():
    example = _flat(3.0, 16)
    ray = Ray(Vec3(0.0, 0.0, 0.0), Vec3(3.0, 4.0, 0.0), 5, PixelPos(1, 2), example)
    assert ray.direction.norm() == pytest.approx(1.0)
    assert len(ray.spectrum) == len(example)
    assert all(value == 0.0 for _, value in ray.spectrum)
    assert ray.hit is False
    assert ray.max_hit_distance == math.inf


def test_shadow_ray_flags():
    ray = Ray.shadow(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 1.0, 0.0), 7.5, _flat(1.0))
    assert ray.skip_hit_shader is True
    assert ray.max_hit_distance == 7.5
    assert ray.hit is False
    assert ray.original_pixel_pos == PixelPos(0, 0)


def test_miss_leaves_ray_black():
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    ray = _primary(Vec3(0.0, 5.0, 0.0), Vec3(0.0, 1.0, 0.0))
    submit_ray(ray, _uniforms([sphere], []))
    assert ray.hit is False
    assert all(value == 0.0 for _, value in ray.spectrum)


def test_shadow_ray_hits_obstacle_within_distance():
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    uniforms = _uniforms([sphere], [])
    near = Ray.shadow(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0), 10.0, _flat(0.0))
    submit_ray(near, uniforms)
    assert near.hit is True
    assert all(value == 0.0 for _, value in near.spectrum)

    short = Ray.shadow(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0), 2.0, _flat(0.0))
    submit_ray(short, uniforms)
    assert short.hit is False


def test_unlit_diffuse_hit_is_black_and_records_distance():
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    origin = Vec3(0.0, 0.0, -5.0)
    direction = Vec3(0.0, 0.0, 1.0)
    ray = _primary(origin, direction)
    submit_ray(ray, _uniforms([sphere], []))
    assert ray.hit is True
    assert ray.hit_distance == pytest.approx(sphere.intersect(origin, direction))
    assert all(value == 0.0 for _, value in ray.spectrum)


def _lit_sphere_spectrum(reflectance, light_spectrum):
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(reflectance), False)
    light = Light(Vec3(0.0, 0.0, -3.0), light_spectrum)
    ray = _primary(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0))
    submit_ray(ray, _uniforms([sphere], [light]))
    assert ray.hit is True
    return ray.spectrum


def test_lit_diffuse_is_positive_and_linear():
    light_spectrum = Spectrum.from_list([10.0 * (i + 1) for i in range(8)], 380.0, 780.0)
    half = _lit_sphere_spectrum(0.5, light_spectrum)
    full = _lit_sphere_spectrum(1.0, light_spectrum)
    assert all(value > 0.0 for _, value in half)
    assert list(full.intensities) == pytest.approx([2.0 * v for v in half.intensities])
    ratios = [v / l for v, l in zip(full.intensities, light_spectrum.intensities)]
    assert ratios == pytest.approx([ratios[0]] * len(ratios))


def test_occluded_light_gives_black():
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    light = Light(Vec3(0.0, 3.0, -3.0), _flat(50.0))
    obstacle = Aabb.box(Vec3(0.0, 1.5, -2.0), 1.0, 0.2, 1.0, _flat(1.0), False)

    open_ray = _primary(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0))
    submit_ray(open_ray, _uniforms([sphere], [light]))
    assert all(value > 0.0 for _, value in open_ray.spectrum)

    blocked_ray = _primary(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0))
    submit_ray(blocked_ray, _uniforms([sphere, obstacle], [light]))
    assert blocked_ray.hit is True
    assert all(value == 0.0 for _, value in blocked_ray.spectrum)


def _mirror_scene():
    mirror = Aabb.box(Vec3(0.0, 0.0, 6.0), 20.0, 20.0, 2.0, _flat(1.0), True)
    sphere = Aabb.sphere(Vec3(7.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    light = Light(Vec3(4.0, 0.0, 4.0), _flat(50.0))
    return _uniforms([mirror, sphere], [light])


def test_metallic_without_bounces_is_black():
    ray = _primary(Vec3(-3.0, 0.0, 0.0), Vec3(1.0, 0.0, 1.0), bounces=1)
    submit_ray(ray, _mirror_scene())
    assert ray.hit is True
    assert all(value == 0.0 for _, value in ray.spectrum)


def test_mirror_shows_lit_object():
    ray = _primary(Vec3(-3.0, 0.0, 0.0), Vec3(1.0, 0.0, 1.0), bounces=3)
    submit_ray(ray, _mirror_scene())
    assert ray.hit is True
    assert all(value > 0.0 for _, value in ray.spectrum)


def test_mismatched_sample_counts_raise():
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    light = Light(Vec3(0.0, 0.0, -3.0), _flat(10.0, 16))
    ray = _primary(Vec3(0.0, 0.0, -5.0), Vec3(0.0, 0.0, 1.0))
    with pytest.raises(ValueError):
        submit_ray(ray, _uniforms([sphere], [light]))


def test_render_empty_scene_is_black():
    rgb = ray_generation_shader(PixelPos(4, 4), Dimensions(9, 9), _uniforms([], []))
    assert rgb == (0.0, 0.0, 0.0)


def _render(pixel, intensity):
    sphere = Aabb.sphere(Vec3(0.0, 0.0, 0.0), 1.0, _flat(1.0), False)
    light = Light(Vec3(0.0, 2.0, -4.0), _flat(intensity))
    return ray_generation_shader(pixel, Dimensions(9, 9), _uniforms([sphere], [light]))


def test_render_center_pixel_is_lit_and_linear():
    single = _render(PixelPos(4, 4), 100.0)
    double = _render(PixelPos(4, 4), 200.0)
    assert any(abs(channel) > 0.0 for channel in single)
    assert double == pytest.approx(tuple(2.0 * c for c in single), rel=1e-9)
    assert _render(PixelPos(4, 4), 100.0) == single


def test_render_corner_pixel_misses_sphere():
    assert _render(PixelPos(0, 0), 100.0) == (0.0, 0.0, 0.0)