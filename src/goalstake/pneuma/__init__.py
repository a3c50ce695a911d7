"""
Pneuma - On-chain interaction layer for goalstake.

Provides the JSON-RPC client, the goal-pool ABI, unit conversion,
transaction utilities and the typed goal-pool contract client.

Uses httpx + eth-account + eth-abi instead of the heavyweight web3.py.
"""
