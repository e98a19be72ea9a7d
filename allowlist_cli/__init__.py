"""
Allowlist CLI

Command-line interface for building and checking Merkle allowlists.

Usage:
    python -m allowlist_cli leaf --beneficiary alice --amount 100
    python -m allowlist_cli tree entitlements.json --out tree.json
    python -m allowlist_cli verify --root 0x... --beneficiary alice --amount 100 --proof 0x..,0x..
    python -m allowlist_cli config --init
"""

__version__ = "0.1.0"
