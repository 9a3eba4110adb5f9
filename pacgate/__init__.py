"""pacgate: decision core for a pacman front end with AUR support."""

__version__ = "0.1.0"
