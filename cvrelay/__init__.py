"""
cvrelay - replay a résumé document onto a remote profile editor

Reads a loosely formatted (markdown-ish) CV, recovers structured entries from it
and fills the matching forms of an online profile one entry at a time.

Architecture:
- Intake Context: heuristic CV parsing into an immutable CVDocument
- Syncing Context: locator resolution, bounded polling, resumable replay of
  entries against a remote surface (Playwright backend)
"""

__version__ = "0.1.0"
