"""mozcpp - compiler configuration for Mozilla-style recursive make builds.

Derives, for any source file in a tree built with ``mach``, the include paths,
defines, forced includes and language standard the real build would use.
"""

__version__ = "0.1.0"
