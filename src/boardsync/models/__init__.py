"""Data model base classes for boardsync.

This module provides shared base classes like CamelModel used for
validating the camelCase payloads returned by the settings service.
"""
