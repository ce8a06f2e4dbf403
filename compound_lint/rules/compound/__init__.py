"""
Compound component rules.

This module contains rules enforcing the Block/Part/Root convention for
compound UI components and flagging deep relay chains between them.

Rules in this module:
- COMPOUND.PART_EXPORT_NAMING - Parts exported under aliases, Block as Root
- COMPOUND.FLAT_OWNER_TREE - Deep chains of self-closing component handoffs
- COMPOUND.BEM_NAMING - Block-prefixed part names in markup
"""

# Rules will be auto-discovered from this directory
