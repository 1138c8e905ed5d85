"""2D geometry primitives for composition planning.

`AffineTransform` follows the row-vector convention used by video frameworks:
a point (x, y) maps to (a*x + c*y + tx, b*x + d*y + ty). `t1.concatenating(t2)`
applies `t1` first, then `t2`.
"""

from __future__ import annotations

from dataclasses import dataclass
import math


@dataclass(frozen=True)
class Size:
    """Width/height pair in pixels."""

    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle with origin at (x, y)."""

    x: float
    y: float
    width: float
    height: float

    @property
    def min_x(self) -> float:
        return min(self.x, self.x + self.width)

    @property
    def min_y(self) -> float:
        return min(self.y, self.y + self.height)

    @property
    def mid_x(self) -> float:
        return self.x + self.width / 2

    @property
    def mid_y(self) -> float:
        return self.y + self.height / 2

    @property
    def size(self) -> Size:
        return Size(abs(self.width), abs(self.height))

    @classmethod
    def from_size(cls, size: Size) -> Rect:
        return cls(0.0, 0.0, size.width, size.height)


@dataclass(frozen=True)
class AffineTransform:
    """Immutable 2D affine transform."""

    a: float = 1.0
    b: float = 0.0
    c: float = 0.0
    d: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    @classmethod
    def identity(cls) -> AffineTransform:
        return cls()

    @classmethod
    def translation(cls, tx: float, ty: float) -> AffineTransform:
        return cls(tx=tx, ty=ty)

    @classmethod
    def scaling(cls, sx: float, sy: float) -> AffineTransform:
        return cls(a=sx, d=sy)

    @classmethod
    def rotation(cls, radians: float) -> AffineTransform:
        cos_v = math.cos(radians)
        sin_v = math.sin(radians)
        return cls(a=cos_v, b=sin_v, c=-sin_v, d=cos_v)

    @classmethod
    def from_degrees(cls, degrees: float, width: float, height: float) -> AffineTransform:
        """Build the orientation transform a capture device records for `degrees`.

        Quarter turns are snapped to exact values and paired with the
        translation that brings the rotated frame back into positive space.
        """
        turns = int(round(degrees / 90.0)) % 4
        if turns == 1:
            return cls(a=0.0, b=1.0, c=-1.0, d=0.0, tx=height, ty=0.0)
        if turns == 2:
            return cls(a=-1.0, b=0.0, c=0.0, d=-1.0, tx=width, ty=height)
        if turns == 3:
            return cls(a=0.0, b=-1.0, c=1.0, d=0.0, tx=0.0, ty=width)
        return cls()

    def concatenating(self, other: AffineTransform) -> AffineTransform:
        """Return the transform applying `self` first and then `other`."""
        return AffineTransform(
            a=self.a * other.a + self.b * other.c,
            b=self.a * other.b + self.b * other.d,
            c=self.c * other.a + self.d * other.c,
            d=self.c * other.b + self.d * other.d,
            tx=self.tx * other.a + self.ty * other.c + other.tx,
            ty=self.tx * other.b + self.ty * other.d + other.ty,
        )

    def translated(self, tx: float, ty: float) -> AffineTransform:
        """Translate in the source space before applying `self`."""
        return AffineTransform.translation(tx, ty).concatenating(self)

    def scaled(self, sx: float, sy: float) -> AffineTransform:
        """Scale in the source space before applying `self`."""
        return AffineTransform.scaling(sx, sy).concatenating(self)

    def rotated(self, radians: float) -> AffineTransform:
        """Rotate in the source space before applying `self`."""
        return AffineTransform.rotation(radians).concatenating(self)

    @property
    def rotation_degrees(self) -> float:
        """Rotation angle in degrees within (-180, 180]."""
        return math.degrees(math.atan2(self.b, self.a))

    @property
    def x_scale(self) -> float:
        """Length of the transformed x unit vector."""
        return math.hypot(self.a, self.b)

    @property
    def y_scale(self) -> float:
        """Length of the transformed y unit vector."""
        return math.hypot(self.c, self.d)

    def apply_to_point(self, x: float, y: float) -> tuple[float, float]:
        return (self.a * x + self.c * y + self.tx, self.b * x + self.d * y + self.ty)

    def apply_to_rect(self, rect: Rect) -> Rect:
        """Return the bounding box of `rect` after the transform."""
        corners = [
            self.apply_to_point(rect.x, rect.y),
            self.apply_to_point(rect.x + rect.width, rect.y),
            self.apply_to_point(rect.x, rect.y + rect.height),
            self.apply_to_point(rect.x + rect.width, rect.y + rect.height),
        ]
        xs = [p[0] for p in corners]
        ys = [p[1] for p in corners]
        return Rect(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))

    def is_close(self, other: AffineTransform, tol: float = 1e-9) -> bool:
        return all(
            math.isclose(mine, theirs, abs_tol=tol)
            for mine, theirs in zip(self.as_tuple(), other.as_tuple())
        )

    def as_tuple(self) -> tuple[float, float, float, float, float, float]:
        return (self.a, self.b, self.c, self.d, self.tx, self.ty)


def round_half_away(value: float) -> int:
    """Round to the nearest integer, ties away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))
