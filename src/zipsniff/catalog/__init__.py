# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/catalog/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Entry-level signature rules and their priority-ordered catalog."""

from __future__ import annotations

from zipsniff.catalog.base import Priority, SignatureRule
from zipsniff.catalog.catalog import Classification, SignatureCatalog, get_signature_catalog

__all__ = [
    "Classification",
    "Priority",
    "SignatureCatalog",
    "SignatureRule",
    "get_signature_catalog",
]
