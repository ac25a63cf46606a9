"""Spark application model, batch scheduler registry, pod resource sizing and Yunikorn support."""

__version__ = "0.1.0"
__all__ = ["javabytes", "memory", "registry", "resource_usage", "scheduler", "yunikorn"]