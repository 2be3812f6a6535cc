"""
valheim_launcher package
------------------------
Valheim dedicated server launcher for Linux / Docker environments.
Resolves the BepInEx (doorstop) injection environment, detects modded
installations, lists installed plugins, and starts the server process
with or without the loader.
"""

__version__ = "0.3.0"
