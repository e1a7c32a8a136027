"""
Central configuration constants for harbor simulation.

Defines default values, literal tokens, and configuration parameters
used across multiple modules.
"""

# ============================================================================
# Tick Engine Configuration
# ============================================================================

# Dock one waiting ship every N minutes
DOCK_INTERVAL_DEFAULT = 10

# Unload every docked ship every N minutes
UNLOAD_INTERVAL_DEFAULT = 5


# ============================================================================
# Statistics Configuration
# ============================================================================

# Outbound ship exits stay counted for this many minutes
THROUGHPUT_WINDOW_MINUTES = 60


# ============================================================================
# Identity Configuration
# ============================================================================

# IMO numbers are 7 digits with no leading zero
IMO_NUMBER_MIN = 1000000
IMO_NUMBER_MAX = 9999999


# ============================================================================
# Text Snapshot Tokens
# ============================================================================

FIELD_DELIMITER = ':'
LIST_DELIMITER = ','

# Quay encoding placeholder when no ship is docked
EMPTY_QUAY_TOKEN = 'None'

# Section headers of the port snapshot
SHIP_QUEUE_HEADER = 'ShipQueue'
STORED_CARGO_HEADER = 'StoredCargo'
MOVEMENTS_HEADER = 'Movements'
EVALUATORS_HEADER = 'Evaluators'


# ============================================================================
# Synthetic Traffic Configuration
# ============================================================================

# Origin tags drawn for generated ships and cargo destinations
TRAFFIC_ORIGINS = ['AU', 'NZ', 'SG', 'JP']

# First IMO number handed out by the traffic generator
TRAFFIC_IMO_BASE = 9000000


# ============================================================================
# Performance Configuration
# ============================================================================

# Tick timing window for rolling average
TICK_TIME_WINDOW = 100  # Number of ticks to average

# Default tick summary interval (print every N ticks)
TICK_SUMMARY_INTERVAL = 100
