"""
tablevault - Encrypted, file-backed table store

A small embedded record store organised into named tables with fixed
column sets, persisted as a single password-encrypted snapshot, with
single-flight write ordering and identity-keyed migrations.
"""

__version__ = "0.1.0"
__author__ = "Systems Engineering Portfolio"
