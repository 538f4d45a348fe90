"""Week-view calendar core: clock-string codec, event geometry and drag rescheduling."""

__version__ = '0.1.0'
