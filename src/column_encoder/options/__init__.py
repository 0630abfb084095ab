"""
Option document modules for the Column Encoder.

This package contains the options handling:
- meta: Node intents and ``encodeThis`` collection from ``.meta`` trees
- option_tree: Typed option conversion and meta-driven encoding
"""
