"""Python API for a configuration session."""

from switchbox.api.facade import Configurator

__all__ = ["Configurator"]
