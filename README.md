# spectraltrace

A compact spectral ray tracer in pure Python. Rays do not carry red, green
and blue values through the scene. Each ray carries a sampled light
spectrum instead. The spectrum becomes a colour only at the end, when it is
converted through the CIE XYZ colour space into linear sRGB. No gamma
correction is applied.

## Installation

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

### `spectraltrace.colour`

- `wavelength_to_xyz(wavelength)` returns the CIE XYZ triple for a
  wavelength in nanometres.
  - The lookup table has a sample every 5 nm.
  - Wavelengths between samples are blended from the two neighbouring
    samples.
  - Wavelengths outside 380–780 nm give `(0.0, 0.0, 0.0)`.
- `xyz_to_rgb(xyz)` converts an XYZ triple to linear sRGB.
- `black_body_radiation(wavelength_nm, temperature_k)` gives spectral
  radiance by Planck's law, in W / sr / m² / nm. It raises `ValueError`
  when the wavelength or the temperature is not positive.

### `spectraltrace.spectrum`

`Spectrum` holds equidistant samples between a lowest and a highest
wavelength. The sample count must be a multiple of 8, from 8 up to 128.
Any other count raises `ValueError`.

Constructors:

- `Spectrum(intensities, lowest, highest)` and `Spectrum.from_list(...)`
- `Spectrum.flat(lowest, highest, sample_count, factor)`
- `Spectrum.empty_like(other)`
- `Spectrum.from_temperature(lowest, highest, temperature_k, sample_count, multiplier)`, which builds a black-body spectrum
- `Spectrum.sunlight(lowest, highest, sample_count, multiplier)`, which approximates sunlight with a 6500 K black body

Inspection:

- the properties `range`, `step` and `intensities`
- `wavelengths()`
- `radiance_at(wavelength)`, which interpolates and gives 0 outside the range
- `radiance()`, the sum of the samples times the step
- `to_rgb()`

Iteration yields `(wavelength, value)` pairs. A spectrum also supports
`len()`, indexing and item assignment.

In-place changes:

- `clamp_negative()` sets negative samples to 0.
- `resample(new_sample_count)` changes the sample count by linear
  interpolation.

Arithmetic:

- `+`, `*`, `/`, `+=` and `*=` work with another spectrum or with a number.
- Two spectra with different sample counts raise `ValueError`.
- The result keeps the range of the left operand.

### `spectraltrace.geometry`

Types:

- `Vec3` is a frozen three-component vector. It supports `+`, `-`,
  scalar `*` and `/`, negation and indexing, plus `dot`, `cross`, `norm`,
  `norm_squared` and `normalize`.
- `Rotation` is a rotation matrix. It has `from_euler_angles(roll, pitch,
  yaw)`, `apply(vector)` and `inverse()`.

Intersection functions:

- `ray_sphere_intersection` returns a tuple of zero, one or two ray
  parameters.
- `ray_aabb_intersection` returns the entry and exit parameters, or `None`
  on a miss. A box that lies behind the ray counts as a miss.
- `ray_oriented_box_intersection` does the same for a rotated box.

Helper functions:

- `rotated_box_normal`
- `reflect`
- `normal_space`
- the quasi-random sequences `radical_inverse`, `hammersley` and
  `random_pcg3d`

### `spectraltrace.tracer`

- `PixelPos` and `Dimensions` describe the frame.
- `Aabb` is a scene object. Build one with `Aabb.sphere`, `Aabb.box` or
  `Aabb.rotated_box`. The `metallic` flag controls how it reflects:
  - a metallic object reflects like a mirror;
  - any other object is lit by direct light from point lights, with shadow
    rays, and by one random diffuse bounce.
- `Light` is a point light with a spectrum.
- `Camera` holds the position, direction, up vector and vertical field of
  view in degrees.
- `RaytracingUniforms` holds the scene data that stays constant for one
  frame.
- `Ray` and `Ray.shadow(...)` are the rays traced through the scene.
- `submit_ray(ray, uniforms)` traces a ray and writes the result into it.
- `ray_generation_shader(pos, dimensions, uniforms)` returns the linear
  sRGB colour of one pixel.
- A ray follows at most 30 bounces.

### `spectraltrace.text_resources`

Short tooltip strings that describe scene parameters, such as the image
size, the camera position, light positions and object dimensions.

## Example

```python
from spectraltrace.spectrum import Spectrum
from spectraltrace.geometry import Vec3
from spectraltrace.tracer import (
    Aabb, Camera, Dimensions, Light, PixelPos, RaytracingUniforms,
    ray_generation_shader,
)

sun = Spectrum.sunlight(380.0, 780.0, 32, 1.0)
white = Spectrum.flat(380.0, 780.0, 32, 0.8)

uniforms = RaytracingUniforms(
    aabbs=[Aabb.sphere(Vec3(0.0, 0.0, 5.0), 1.0, white, False)],
    lights=[Light(Vec3(0.0, 5.0, 0.0), sun * 50.0)],
    camera=Camera(Vec3(0.0, 0.0, 0.0), Vec3(0.0, 0.0, 1.0), Vec3(0.0, 1.0, 0.0), 60.0),
    example_spectrum=white,
    frame_id=0,
    intended_frames_amount=1,
)

r, g, b = ray_generation_shader(PixelPos(32, 32), Dimensions(64, 64), uniforms)
```

To reduce noise, render the same pixel several times with increasing
`frame_id` and average the results. Over `intended_frames_amount` frames,
the camera shifts its sample position within the pixel along a Hammersley
sequence.

## What it does not do

The package traces single pixels. It provides none of the following:

- a command-line program or a graphical interface
- a loop that renders a whole frame, or rendering across several threads
- image files or any other output beyond the RGB triples returned by
  `ray_generation_shader`
- scene files or saved settings

Building the image from pixels and writing it out is left to the caller.