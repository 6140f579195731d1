"""BL2 Patcher - fingerprint-verified in-place patcher for the Borderlands 2 executable."""

from .version import load_version

__version__ = load_version()
