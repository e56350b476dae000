"""Gerrit patchset-created to Solano CI bridge: resolution, payload and delivery."""
