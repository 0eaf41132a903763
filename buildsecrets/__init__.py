"""Build-time secret provisioning for Nix pre-build hooks."""

__version__ = "0.1.0"
