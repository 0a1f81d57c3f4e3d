"""
Battery profile simulator package.

Builds OpenFMB-style description, reading, event and control profiles for a
simulated battery storage device, ready for serialization and publishing.

CHANGELOG:
- 2026-10-19: Initial creation (STORY-001)

TODO:
- None
"""
