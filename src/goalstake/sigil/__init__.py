"""
Sigil - Wallet layer for goalstake.

Key storage (eth), the local EIP-1193 style provider, and the wallet
gateway the session coordinator talks to.
"""
