"""Version of the GCE system variables collector."""

# Versioning scheme: MAJOR.MINOR
__version__ = '1.0'
