"""Alert, incident and plugin resources for Icinga-based cluster monitoring, with validation and resource definitions."""

__version__ = "0.1.0"