from . import lines, stations

__all__ = ["lines", "stations"]
