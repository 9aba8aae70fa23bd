"""Desktop installer packager (jpackage-based, step-driven).

Core design goals:
- One linear pipeline of small steps
- Explicit context passed from step to step
- Verified JDK downloads (SHA-256 gate)
- Operator confirmation before irreversible actions
- Centralized logging
"""
