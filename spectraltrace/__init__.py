"""Spectral ray tracing: sampled light spectra, colour conversion, geometry and a pixel tracer."""

__version__ = "0.2.0"
__all__ = ["colour", "geometry", "spectrum", "text_resources", "tracer"]