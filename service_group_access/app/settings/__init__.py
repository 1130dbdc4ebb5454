"""
Settings package.

Holds the typed settings that configure group based access and the
engine that edits them:

- models: Setting, its type tags and the group list rules.
- registry: Builds the settings from the directory and site catalog,
  loads and saves their values.
- mutation: add/set/remove/reset on a single setting.
- formatter: Display strings for setting values.
"""
