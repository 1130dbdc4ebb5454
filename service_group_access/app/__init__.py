"""
Group Access Service package for the LDAP Group Access layer.

This package decides which access a directory user holds based on the
groups it is member of, and manages the settings naming those groups. It
provides:

- app.main: HTTP surface for settings and access resolution.
- app.cli: Command line tools to list and modify settings.
- app.settings: Typed settings, their registry and the mutation engine.
- app.access: Superuser/admin/view resolution from group memberships.
- app.directory: Group lister and site catalog collaborators.
- app.persistence: Stores for setting values.

Guidelines:
- Resolution is recomputed on every call; nothing is cached.
- A failed mutation never reaches the store.
"""
