"""LnOS Installer (Python-first, prompt-driven).

Core design goals:
- Idempotent configuration selection, persisted after every answer
- Strictly ordered, non-resumable provisioning pipeline
- Every external tool behind an injectable command runner
- One top-level error/cancellation handler
- Centralized logging
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
