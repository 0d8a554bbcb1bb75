"""Linear scale and 1-D zoom transform (d3-zoom semantics)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class LinearScale:
    """Maps a value domain linearly onto a pixel range."""

    domain: tuple[float, float]
    range: tuple[float, float]

    def __call__(self, value: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if d1 == d0:
            return (r0 + r1) / 2
        return r0 + (value - d0) / (d1 - d0) * (r1 - r0)

    def invert(self, pixel: float) -> float:
        d0, d1 = self.domain
        r0, r1 = self.range
        if r1 == r0:
            return (d0 + d1) / 2
        return d0 + (pixel - r0) / (r1 - r0) * (d1 - d0)


@dataclass(frozen=True)
class ZoomTransform:
    """Accumulated pan/zoom: pixel -> pixel * k + x."""

    k: float = 1.0
    x: float = 0.0

    def apply(self, pixel: float) -> float:
        return pixel * self.k + self.x

    def invert(self, pixel: float) -> float:
        return (pixel - self.x) / self.k

    def rescale(self, scale: LinearScale) -> LinearScale:
        """The base scale as seen through this transform (d3 rescaleX)."""
        r0, r1 = scale.range
        domain = (scale.invert(self.invert(r0)), scale.invert(self.invert(r1)))
        return LinearScale(domain=domain, range=scale.range)

    def scale_by(self, factor: float, anchor: float, k_min: float, k_max: float) -> "ZoomTransform":
        """Zoom by `factor` around the `anchor` pixel, with k clamped to [k_min, k_max]."""
        k = min(max(self.k * factor, k_min), k_max)
        # keep the point under the anchor fixed
        x = anchor - self.invert(anchor) * k
        return ZoomTransform(k=k, x=x)

    def translate_by(self, dx: float) -> "ZoomTransform":
        return ZoomTransform(k=self.k, x=self.x + dx)


IDENTITY = ZoomTransform()
