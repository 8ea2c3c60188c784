"""Colour science helpers: CIE XYZ lookup, XYZ to linear sRGB, and Planck's law."""

from __future__ import annotations

import math

VISIBLE_LIGHT_WAVELENGTH_LOWER_BOUND = 380.0
VISIBLE_LIGHT_WAVELENGTH_UPPER_BOUND = 780.0

SPEED_OF_LIGHT = 299_792_458.0  # m/s
PLANCK_CONSTANT = 6.62607015e-34
BOLTZMANN_CONSTANT = 1.380649e-23

Triple = tuple[float, float, float]

# Rows of the XYZ -> linear sRGB matrix; gamma correction is not applied.
XYZ_TO_RGB_MATRIX: tuple[Triple, Triple, Triple] = (
    (2.041369, -0.5649464, -0.3446944), (-0.969266, 1.8760108, 0.0415560),
    (0.0134474, -0.1183897, 1.0154096),
)

_TABLE_STEP = 5.0

# CIE colour matching functions sampled every 5 nm from 380 nm to 780 nm.
# Each line holds ten samples (50 nm); the last entry is 780 nm.
_X_BAR = (
    0.00016, 0.000662, 0.002362, 0.007242, 0.01911, 0.0434, 0.084736, 0.140638, 0.204492, 0.264737,
    0.314679, 0.357719, 0.383734, 0.386726, 0.370702, 0.342957, 0.302273, 0.254085, 0.195618, 0.132349,
    0.080507, 0.041072, 0.016172, 0.005132, 0.003816, 0.015444, 0.037465, 0.071358, 0.117749, 0.172953,
    0.236491, 0.304213, 0.376772, 0.451584, 0.529826, 0.616053, 0.705224, 0.793832, 0.878655, 0.951162,
    1.01416, 1.0743, 1.11852, 1.1343, 1.12399, 1.0891, 1.03048, 0.95074, 0.856297, 0.75493,
    0.647467, 0.53511, 0.431567, 0.34369, 0.268329, 0.2043, 0.152568, 0.11221, 0.081261, 0.05793,
    0.040851, 0.028623, 0.019941, 0.013842, 0.009577, 0.006605, 0.004553, 0.003145, 0.002175, 0.001506,
    0.001045, 0.000727, 0.000508, 0.000356, 0.000251, 0.000178, 0.000126, 0.00009, 0.000065, 0.000046,
    0.000033,
)
_Y_BAR = (
    0.000017, 0.000072, 0.000253, 0.000769, 0.002004, 0.004509, 0.008756, 0.014456, 0.021391, 0.029497,
    0.038676, 0.049602, 0.062077, 0.074704, 0.089456, 0.106256, 0.128201, 0.152761, 0.18519, 0.21994,
    0.253589, 0.297665, 0.339133, 0.395379, 0.460777, 0.53136, 0.606741, 0.68566, 0.761757, 0.82333,
    0.875211, 0.92381, 0.961988, 0.9822, 0.991761, 0.99911, 0.99734, 0.98238, 0.955552, 0.915175,
    0.868934, 0.825623, 0.777405, 0.720353, 0.658341, 0.593878, 0.527963, 0.461834, 0.398057, 0.339554,
    0.283493, 0.228254, 0.179828, 0.140211, 0.107633, 0.081187, 0.060281, 0.044096, 0.0318, 0.022602,
    0.015905, 0.01113, 0.007749, 0.005375, 0.003718, 0.002565, 0.001768, 0.001222, 0.000846, 0.000586,
    0.000407, 0.000284, 0.000199, 0.00014, 0.000098, 0.00007, 0.00005, 0.000036, 0.000025, 0.000018,
    0.000013,
)
# z-bar is zero from 560 nm onwards; only the non-zero head is listed.
_Z_BAR_HEAD = (
    0.000705, 0.002928, 0.010482, 0.032344, 0.086011, 0.19712, 0.389366, 0.65676, 0.972542, 1.2825,
    1.55348, 1.7985, 1.96728, 2.0273, 1.9948, 1.9007, 1.74537, 1.5549, 1.31756, 1.0302,
    0.772125, 0.57006, 0.415254, 0.302356, 0.218502, 0.159249, 0.112044, 0.082248, 0.060709, 0.04305,
    0.030451, 0.020584, 0.013676, 0.007918, 0.003988, 0.001091,
)
_Z_BAR = _Z_BAR_HEAD + (0.0,) * (len(_X_BAR) - len(_Z_BAR_HEAD))

WAVELENGTH_TO_XYZ_TABLE: tuple[Triple, ...] = tuple(zip(_X_BAR, _Y_BAR, _Z_BAR))


def wavelength_to_xyz(wavelength: float) -> Triple:
    """Return the CIE XYZ colour of a wavelength in nanometres.

    Wavelengths outside 380-780 nm give black. Values between table samples
    are blended from the two neighbouring samples.
    """
    low, high = VISIBLE_LIGHT_WAVELENGTH_LOWER_BOUND, VISIBLE_LIGHT_WAVELENGTH_UPPER_BOUND
    if not low <= wavelength <= high:
        return (0.0, 0.0, 0.0)

    offset = (wavelength - low) / _TABLE_STEP
    slot = int(offset)
    if wavelength % _TABLE_STEP == 0.0:
        return WAVELENGTH_TO_XYZ_TABLE[slot]

    weight = offset - slot
    below, above = WAVELENGTH_TO_XYZ_TABLE[slot], WAVELENGTH_TO_XYZ_TABLE[slot + 1]
    x, y, z = (b * weight + a * (1.0 - weight) for b, a in zip(below, above))
    return (x, y, z)


def xyz_to_rgb(xyz: Triple) -> Triple:
    """Convert an XYZ triple to linear sRGB (no gamma correction)."""
    r, g, b = (sum(m * c for m, c in zip(row, xyz)) for row in XYZ_TO_RGB_MATRIX)
    return (r, g, b)


def black_body_radiation(wavelength_nm: float, temperature_k: float) -> float:
    """Spectral radiance (W / sr / m^2 / nm) of a black body by Planck's law.

    Raises ValueError for a non-positive wavelength or temperature.
    """
    if not wavelength_nm > 0.0:
        raise ValueError(
            f"Wavelengths must be physical, real, positive values. Got: {wavelength_nm}nm."
        )
    if not temperature_k > 0.0:
        raise ValueError(
            f"Temperatures in Kelvin are real, positive values. Got: {temperature_k}K."
        )

    metres = wavelength_nm * 1e-9
    numerator = 2.0 * PLANCK_CONSTANT * SPEED_OF_LIGHT**2 / metres**5
    exponent = PLANCK_CONSTANT * SPEED_OF_LIGHT / (metres * temperature_k * BOLTZMANN_CONSTANT)
    try:
        denominator = math.expm1(exponent)
    except OverflowError:
        return 0.0
    return numerator / denominator * 1e-9