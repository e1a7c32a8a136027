"""
Harbor Port Simulation

A deterministic, per-minute simulator of a maritime port. Ships queue for
admission, dock at quays, exchange cargo with the warehouse and depart.
Port state round-trips through a line- and colon-delimited text snapshot.

Architecture: Port is the source of truth. Dashboards and launchers are consumers.
"""

__version__ = "0.1.0"
