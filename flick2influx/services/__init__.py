"""
Services package for flick2influx.
Contains the Flick API clients and the recording routines.
"""

from .flick_client import FlickAndroidClient, FlickWebClient
from .recorder import Recorder, resolve_mode

__all__ = [
    "FlickAndroidClient",
    "FlickWebClient",
    "Recorder",
    "resolve_mode",
]
