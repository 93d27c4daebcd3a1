"""LSX - storage executor contract for locally attached block devices."""

__version__ = "0.1.0"
