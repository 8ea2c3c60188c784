"""Vector maths, ray/shape intersection tests and sampling sequences for the tracer."""

from __future__ import annotations

import math
from collections.abc import Iterator
from dataclasses import dataclass, field

F32_DELTA = 0.00001

_U32_MASK = 0xFFFFFFFF
_RADICAL_INVERSE_SCALE = 2.328_306_4e-10  # 1 / 2^32
_PCG_MULTIPLIER = 1664525
_PCG_INCREMENT = 1013904223


@dataclass(frozen=True, slots=True)
class Vec3:
    """A three-component vector, also used for points in space."""

    x: float
    y: float
    z: float

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, index: int) -> float:
        return (self.x, self.y, self.z)[index]

    def __add__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vec3) -> Vec3:
        if not isinstance(other, Vec3):
            return NotImplemented
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vec3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vec3:
        if not isinstance(scalar, (int, float)):
            return NotImplemented
        return Vec3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vec3:
        return Vec3(-self.x, -self.y, -self.z)

    def dot(self, other: Vec3) -> float:
        """Scalar product."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vec3) -> Vec3:
        """Vector product, self x other."""
        return Vec3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def norm_squared(self) -> float:
        """Squared length."""
        return self.dot(self)

    def norm(self) -> float:
        """Length."""
        return math.sqrt(self.norm_squared())

    def normalize(self) -> Vec3:
        """Unit vector of the same direction; a zero vector gives NaN components."""
        length = self.norm()
        if length == 0.0:
            return Vec3(math.nan, math.nan, math.nan)
        return self / length


_IDENTITY_ROWS = ((1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0))


@dataclass(frozen=True, slots=True)
class Rotation:
    """A 3D rotation held as a row-major 3x3 matrix. The default is the identity."""

    rows: tuple[tuple[float, float, float], ...] = field(default=_IDENTITY_ROWS)

    @classmethod
    def from_euler_angles(cls, roll: float, pitch: float, yaw: float) -> Rotation:
        """Rotation about x by roll, then about y by pitch, then about z by yaw (radians)."""
        sr, cr = math.sin(roll), math.cos(roll)
        sp, cp = math.sin(pitch), math.cos(pitch)
        sy, cy = math.sin(yaw), math.cos(yaw)
        return cls(
            (
                (cy * cp, cy * sp * sr - sy * cr, cy * sp * cr + sy * sr),
                (sy * cp, sy * sp * sr + cy * cr, sy * sp * cr - cy * sr),
                (-sp, cp * sr, cp * cr),
            )
        )

    def apply(self, vector: Vec3) -> Vec3:
        """Rotate a vector."""
        return Vec3(*(a * vector.x + b * vector.y + c * vector.z for a, b, c in self.rows))

    def inverse(self) -> Rotation:
        """The opposite rotation (the transposed matrix)."""
        return Rotation(tuple(zip(*self.rows)))  # type: ignore[arg-type]


def _fmax(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a >= b else b


def _fmin(a: float, b: float) -> float:
    if math.isnan(a):
        return b
    if math.isnan(b):
        return a
    return a if a <= b else b


def ray_sphere_intersection(
    origin: Vec3, direction: Vec3, center: Vec3, radius: float
) -> tuple[float, ...]:
    """Ray parameters where the ray meets the sphere.

    Returns an empty tuple on a miss, one value when the ray grazes the
    sphere and two values when it passes through.
    """
    oc = origin - center
    a = direction.dot(direction)
    b = 2.0 * oc.dot(direction)
    c = oc.dot(oc) - radius * radius
    discriminant = b * b - 4.0 * a * c

    if discriminant < 0.0:
        return ()
    if discriminant == 0.0:
        return ((-b - math.sqrt(discriminant)) / (2.0 * a),)
    root = math.sqrt(discriminant)
    return ((-b - root) / (2.0 * a), (-b + root) / (2.0 * a))


def ray_aabb_intersection(
    origin: Vec3, direction: Vec3, point_min: Vec3, point_max: Vec3
) -> tuple[float, float] | None:
    """Entry and exit parameters of a ray through an axis-aligned box, or None on a miss.

    A box lying entirely behind the ray counts as a miss.
    """
    t_min = -math.inf
    t_max = math.inf

    for o, d, lo, hi in zip(origin, direction, point_min, point_max):
        inverse = 1.0 / d if d != 0.0 else math.copysign(math.inf, d)
        t1 = (lo - o) * inverse
        t2 = (hi - o) * inverse
        near, far = (t2, t1) if inverse < 0.0 else (t1, t2)

        t_min = _fmax(t_min, near)
        t_max = _fmin(t_max, far)
        if t_max <= t_min:
            return None

    if t_max < 0.0:
        return None
    return (t_min, t_max)


def ray_oriented_box_intersection(
    origin: Vec3, direction: Vec3, position: Vec3, dimensions: Vec3, rotation: Rotation
) -> tuple[float, float] | None:
    """Entry and exit parameters of a ray through a rotated box centred at position."""
    inverse = rotation.inverse()
    local_origin = inverse.apply(origin - position)
    local_direction = inverse.apply(direction)
    half = dimensions * 0.5
    return ray_aabb_intersection(local_origin, local_direction, -half, half)


def rotated_box_normal(
    position: Vec3, dimensions: Vec3, rotation: Rotation, point: Vec3
) -> Vec3:
    """World-space normal of the rotated-box face nearest to point."""
    local = rotation.inverse().apply(point - position)
    half = dimensions * 0.5

    candidates = (
        (abs(half.x - local.x), Vec3(1.0, 0.0, 0.0)),
        (abs(-half.x - local.x), Vec3(-1.0, 0.0, 0.0)),
        (abs(half.y - local.y), Vec3(0.0, 1.0, 0.0)),
        (abs(-half.y - local.y), Vec3(0.0, -1.0, 0.0)),
        (abs(half.z - local.z), Vec3(0.0, 0.0, 1.0)),
        (abs(-half.z - local.z), Vec3(0.0, 0.0, -1.0)),
    )
    best_distance, best_normal = candidates[0]
    for distance, normal in candidates[1:]:
        if distance < best_distance:
            best_distance, best_normal = distance, normal
    return rotation.apply(best_normal)


def reflect(incident: Vec3, normal: Vec3) -> Vec3:
    """Mirror incident about a unit normal; incident points towards the surface."""
    return incident - normal * (2.0 * normal.dot(incident))


def normal_space(normal: Vec3) -> tuple[Vec3, Vec3, Vec3]:
    """Columns (tangent, bitangent, normal) of a basis whose third axis is normal.

    A local direction (a, b, c) maps to tangent*a + bitangent*b + normal*c.
    """
    some_vec = Vec3(1.0, 0.0, 0.0)
    dd = some_vec.dot(normal)
    tangent = Vec3(0.0, 1.0, 0.0)
    if 1.0 - abs(dd) > F32_DELTA:
        tangent = some_vec.cross(normal).normalize()
    bitangent = normal.cross(tangent)
    return (tangent, bitangent, normal)


def radical_inverse(bits: int) -> float:
    """Van der Corput radical inverse in base 2 of a 32-bit integer, in [0, 1)."""
    bits &= _U32_MASK
    bits = ((bits >> 16) | (bits << 16)) & _U32_MASK
    bits = ((bits & 0x55555555) << 1 | (bits & 0xAAAAAAAA) >> 1) & _U32_MASK
    bits = ((bits & 0x33333333) << 2 | (bits & 0xCCCCCCCC) >> 2) & _U32_MASK
    bits = ((bits & 0x0F0F0F0F) << 4 | (bits & 0xF0F0F0F0) >> 4) & _U32_MASK
    bits = ((bits & 0x00FF00FF) << 8 | (bits & 0xFF00FF00) >> 8) & _U32_MASK
    return bits * _RADICAL_INVERSE_SCALE


def hammersley(n: int, total: int) -> tuple[float, float]:
    """Point n of a Hammersley set of total points; n should be below total."""
    return ((n + 0.5) / total, radical_inverse(n + 1))


def random_pcg3d(x: int, y: int, z: int) -> tuple[float, float, float]:
    """Three quasi-random floats in [0, 1] hashed from three unsigned 32-bit integers."""
    x = (x * _PCG_MULTIPLIER + _PCG_INCREMENT) & _U32_MASK
    y = (y * _PCG_MULTIPLIER + _PCG_INCREMENT) & _U32_MASK
    z = (z * _PCG_MULTIPLIER + _PCG_INCREMENT) & _U32_MASK
    x = (x + y * z) & _U32_MASK
    y = (y + z * x) & _U32_MASK
    z = (z + x * y) & _U32_MASK
    x ^= x >> 16
    y ^= y >> 16
    z ^= z >> 16
    x = (x + y * z) & _U32_MASK
    y = (y + z * x) & _U32_MASK
    z = (z + x * y) & _U32_MASK

    reciprocal = 1.0 / _U32_MASK
    return (x * reciprocal, y * reciprocal, z * reciprocal)