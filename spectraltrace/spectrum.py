"""Sampled spectra of spectral radiance or reflectance over a wavelength range."""

from __future__ import annotations

import math
from collections.abc import Iterable, Iterator
from typing import Union

from spectraltrace.colour import black_body_radiation, wavelength_to_xyz, xyz_to_rgb

MAX_SAMPLE_COUNT = 128
SAMPLE_COUNT_MULTIPLE = 8
SUNLIGHT_TEMPERATURE_K = 6500.0

Operand = Union["Spectrum", float, int]


def _check_sample_count(count: int) -> None:
    if count < SAMPLE_COUNT_MULTIPLE or count > MAX_SAMPLE_COUNT:
        raise ValueError(
            f"Sample count must be between {SAMPLE_COUNT_MULTIPLE} and {MAX_SAMPLE_COUNT}. "
            f"Got: {count}."
        )
    if count % SAMPLE_COUNT_MULTIPLE != 0:
        raise ValueError(
            f"Sample count must be a multiple of {SAMPLE_COUNT_MULTIPLE}. Got: {count}."
        )


def _interpolate_down(values: list[float], target_length: int) -> list[float]:
    """Shrink values to target_length (at least half the length) by linear interpolation."""
    original_length = len(values)
    if original_length <= 1 or target_length <= 1:
        raise ValueError("Both lengths must be greater than one.")
    if original_length < target_length:
        raise ValueError("Target length must not exceed the original length.")
    if original_length // 2 > target_length:
        raise ValueError(
            "Target length must be at least half the original length. "
            f"Got target: {target_length}, original: {original_length}."
        )

    factor = original_length / target_length
    result = []
    for i in range(target_length):
        position = factor * i
        index = math.floor(position)
        ratio = position - index
        if index + 1 < original_length:
            result.append(values[index] * (1.0 - ratio) + values[index + 1] * ratio)
        else:
            result.append(values[index])
    return result


def _collapse_to_half(values: list[float]) -> list[float]:
    """Halve the length, rounded up to a multiple of eight, by linear interpolation."""
    if len(values) <= SAMPLE_COUNT_MULTIPLE:
        raise ValueError("List must hold more than eight values to be collapsed.")
    half = len(values) // 2
    if half % SAMPLE_COUNT_MULTIPLE:
        half = (half // SAMPLE_COUNT_MULTIPLE + 1) * SAMPLE_COUNT_MULTIPLE
    return _interpolate_down(values, half)


class Spectrum:
    """Equidistant samples of a distribution between two wavelengths (in nanometres).

    The sample count is a multiple of eight and at most 128. Arithmetic between
    spectra requires equal sample counts and keeps the left operand's range.
    """

    __slots__ = ("lowest_wavelength", "highest_wavelength", "_values")
    __hash__ = None  # type: ignore[assignment]

    def __init__(
        self,
        intensities: Iterable[float],
        lowest_wavelength: float,
        highest_wavelength: float,
    ) -> None:
        values = [float(v) for v in intensities]
        _check_sample_count(len(values))
        self.lowest_wavelength = float(lowest_wavelength)
        self.highest_wavelength = float(highest_wavelength)
        self._values = values

    # construction

    @classmethod
    def empty_like(cls, other: Spectrum) -> Spectrum:
        """A zero spectrum with the range and sample count of other."""
        return cls.flat(other.lowest_wavelength, other.highest_wavelength, len(other), 0.0)

    @classmethod
    def from_list(
        cls, intensities: Iterable[float], lowest_wavelength: float, highest_wavelength: float
    ) -> Spectrum:
        """A spectrum holding the given samples."""
        return cls(intensities, lowest_wavelength, highest_wavelength)

    @classmethod
    def flat(
        cls,
        lowest_wavelength: float,
        highest_wavelength: float,
        sample_count: int,
        reflectance_factor: float,
    ) -> Spectrum:
        """A spectrum with every sample set to reflectance_factor."""
        return cls([reflectance_factor] * sample_count, lowest_wavelength, highest_wavelength)

    @classmethod
    def from_temperature(
        cls,
        lowest_wavelength: float,
        highest_wavelength: float,
        temperature_k: float,
        sample_count: int,
        multiplier: float,
    ) -> Spectrum:
        """Black-body radiation at temperature_k, each sample scaled by multiplier."""
        _check_sample_count(sample_count)
        step = (highest_wavelength - lowest_wavelength) / (sample_count - 1)
        values = [
            black_body_radiation(lowest_wavelength + step * i, temperature_k) * multiplier
            for i in range(sample_count)
        ]
        return cls(values, lowest_wavelength, highest_wavelength)

    @classmethod
    def sunlight(
        cls,
        lowest_wavelength: float,
        highest_wavelength: float,
        sample_count: int,
        multiplier: float,
    ) -> Spectrum:
        """Approximate sunlight by black-body radiation at 6500 K."""
        return cls.from_temperature(
            lowest_wavelength, highest_wavelength, SUNLIGHT_TEMPERATURE_K, sample_count, multiplier
        )

    # inspection

    @property
    def range(self) -> tuple[float, float]:
        """The lowest and highest wavelength, in that order."""
        return (self.lowest_wavelength, self.highest_wavelength)

    @property
    def intensities(self) -> list[float]:
        """A copy of the samples."""
        return list(self._values)

    @property
    def step(self) -> float:
        """Distance in nanometres between neighbouring samples."""
        return (self.highest_wavelength - self.lowest_wavelength) / (len(self._values) - 1)

    def wavelengths(self) -> list[float]:
        """The wavelength of each sample."""
        step = self.step
        return [self.lowest_wavelength + step * i for i in range(len(self._values))]

    def radiance_at(self, wavelength: float) -> float:
        """The sample value at wavelength, interpolated between the nearest samples.

        Wavelengths outside the range give 0.
        """
        lower, upper = self.range
        if not lower <= wavelength <= upper:
            return 0.0
        position = (wavelength - lower) / (upper - lower) * (len(self._values) - 1)
        if float(position).is_integer():
            return self._values[int(position)]
        index_lower = math.floor(position)
        index_upper = math.ceil(position)
        frac = position - index_lower
        return self._values[index_lower] * frac + self._values[index_upper] * (1.0 - frac)

    def radiance(self) -> float:
        """Integral of the samples over the wavelength range."""
        step = self.step
        return sum(value * step for value in self._values)

    def to_rgb(self) -> tuple[float, float, float]:
        """Convert to linear sRGB through the CIE XYZ colour space."""
        count = len(self._values)
        x_sum = y_sum = z_sum = 0.0
        for wavelength, value in self:
            x, y, z = wavelength_to_xyz(wavelength)
            x_sum += x / count * value
            y_sum += y / count * value
            z_sum += z / count * value
        return xyz_to_rgb((x_sum, y_sum, z_sum))

    # modification

    def clamp_negative(self) -> None:
        """Raise every negative sample to zero."""
        self._values = [max(value, 0.0) for value in self._values]

    def resample(self, new_sample_count: int) -> None:
        """Resample in place to new_sample_count samples by linear interpolation."""
        if new_sample_count <= 1:
            raise ValueError(f"Sample count must be greater than one. Got: {new_sample_count}.")
        _check_sample_count(new_sample_count)

        count = len(self._values)
        if new_sample_count == count:
            return

        if new_sample_count < count:
            working = list(self._values)
            while len(working) > 2 * new_sample_count:
                working = _collapse_to_half(working)
            self._values = _interpolate_down(working, new_sample_count)
            return

        values = self._values
        resampled = []
        for i in range(new_sample_count):
            position = i / (new_sample_count - 1) * (count - 1)
            index_lower = math.floor(position)
            index_upper = min(index_lower + 1, count - 1)
            frac_upper = position - index_lower
            resampled.append(
                values[index_lower] * (1.0 - frac_upper) + values[index_upper] * frac_upper
            )
        self._values = resampled

    # container protocol

    def __iter__(self) -> Iterator[tuple[float, float]]:
        """Yield (wavelength, value) pairs."""
        return zip(self.wavelengths(), list(self._values))

    def __len__(self) -> int:
        return len(self._values)

    def __getitem__(self, index: int) -> float:
        return self._values[index]

    def __setitem__(self, index: int, value: float) -> None:
        self._values[index] = float(value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Spectrum):
            return NotImplemented
        return self.range == other.range and self._values == other._values

    def __repr__(self) -> str:
        return (
            f"Spectrum({self._values!r}, {self.lowest_wavelength!r}, "
            f"{self.highest_wavelength!r})"
        )

    # arithmetic

    def _other_values(self, other: Operand) -> list[float]:
        if isinstance(other, Spectrum):
            if len(other) != len(self):
                raise ValueError(
                    f"Sample counts differ: {len(self)} and {len(other)}."
                )
            return other._values
        return [float(other)] * len(self._values)

    def _combined(self, values: list[float]) -> Spectrum:
        return Spectrum(values, self.lowest_wavelength, self.highest_wavelength)

    def __add__(self, other: Operand) -> Spectrum:
        if not isinstance(other, (Spectrum, int, float)):
            return NotImplemented
        rhs = self._other_values(other)
        return self._combined([a + b for a, b in zip(self._values, rhs)])

    def __iadd__(self, other: Operand) -> Spectrum:
        if not isinstance(other, (Spectrum, int, float)):
            return NotImplemented
        rhs = self._other_values(other)
        self._values = [a + b for a, b in zip(self._values, rhs)]
        return self

    def __mul__(self, other: Operand) -> Spectrum:
        if not isinstance(other, (Spectrum, int, float)):
            return NotImplemented
        rhs = self._other_values(other)
        return self._combined([a * b for a, b in zip(self._values, rhs)])

    def __imul__(self, other: Operand) -> Spectrum:
        if not isinstance(other, (Spectrum, int, float)):
            return NotImplemented
        rhs = self._other_values(other)
        self._values = [a * b for a, b in zip(self._values, rhs)]
        return self

    def __truediv__(self, other: Operand) -> Spectrum:
        if not isinstance(other, (Spectrum, int, float)):
            return NotImplemented
        rhs = self._other_values(other)
        return self._combined([a / b for a, b in zip(self._values, rhs)])