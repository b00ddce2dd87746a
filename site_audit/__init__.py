# site_audit/__init__.py
"""
SiteAudit package initializer.
Defines package version and exposes CLI.
"""
__version__ = "0.1.0"

# Expose CLI entry point (site_audit.cli stays the module)
from site_audit.cli import cli as main_cli
