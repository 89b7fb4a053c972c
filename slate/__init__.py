"""Slate: desktop theming and provisioning for a single-user machine.

Core pieces:
- Block-device provenance: root mount -> mapped layers -> physical partition
  -> stable identifiers
- A typed YAML config describing palette, hardware and the managed apps
- Stage-then-rename deployment of rendered app configs
- Deduplicated, best-effort reload notifications
"""

__version__ = "0.1.0"
