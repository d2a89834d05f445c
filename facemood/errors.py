# facemood/errors.py
# error types surfaced to the host; none of them are retried internally


class FaceMoodError(RuntimeError):
    """Base class for sensor failures."""


class CameraUnavailableError(FaceMoodError):
    """Camera access was denied or no device could be opened."""


class ModelLoadError(FaceMoodError):
    """A required analysis capability failed to load."""


class LifecycleError(FaceMoodError):
    """The controller was used outside its lifecycle (e.g. restarted after deactivation)."""
