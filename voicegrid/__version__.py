"""Version information for Voice Data Grid."""

__version__ = "0.3.0"
__version_info__ = tuple(int(x) for x in __version__.split("."))

# Version history
# 0.3.0 - Whisper.cpp mic source, results page, console/script mode
# 0.2.0 - Ordered rule interpreter, sub-cell selection, box commands
# 0.1.0 - Initial release
