"""
Persistence package for Group Access Service.

Stores setting values keyed by setting name. Provides an in-memory store
and a JSON file store; both satisfy the ``SettingsStore`` protocol used by
the settings registry.
"""
