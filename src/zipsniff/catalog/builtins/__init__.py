# topmark:header:start
#
#   project      : ZipSniff
#   file         : __init__.py
#   file_relpath : src/zipsniff/catalog/builtins/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Built-in signature rule groups for ZipSniff.

Each submodule exports a ``RULES`` list of
`zipsniff.catalog.base.SignatureRule` instances. The aggregator in
``zipsniff.catalog.catalog`` concatenates these lists, in a fixed module
order, to build the default catalog; that order is the declaration order used
to break priority ties.

Attributes:
    (module) RULES: Not defined here. Each submodule defines its own list.
"""

from __future__ import annotations
