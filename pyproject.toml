[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "spectraltrace"
version = "0.2.0"
description = "A small spectral ray tracer: sampled spectra, colour conversion and ray-object intersection"
requires-python = ">=3.10"
dependencies = []
keywords = ["raytracing", "spectrum", "rendering", "black body", "colour", "CIE XYZ"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Multimedia :: Graphics :: 3D Rendering",
    "Topic :: Scientific/Engineering :: Physics",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["spectraltrace"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
