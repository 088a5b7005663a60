"""Client-side components for a tunnelling proxy: signed package verification, tunnel core notice handling, diagnostics and feedback documents."""

__version__ = "0.1.0"