"""
Generator modules for the Column Encoder.

This package contains identifier generators:
- name_generator: Synthetic identifier generation
"""
