"""sunpkg — declarative lifecycle management for SVR4 (Solaris) packages."""

__version__ = "0.1.0"
