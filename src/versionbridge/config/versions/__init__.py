"""Settings file version definitions.

Each version module holds the converter from the previous settings schema to
its own, and back. ``SettingsManager`` registers them on a ``ConversionEngine``.
"""

CURRENT_VERSION = 2

__all__ = ["CURRENT_VERSION"]
