"""
Directory package.

Defines the collaborators the settings registry relies on: a group lister
that names every group known to the directory and a site catalog that
enumerates the sites access is granted on. A YAML-backed implementation
is provided for local use.
"""
