"""
Transport Management Engine

Shipment lifecycle and fleet-assignment engine for a transport management
console:
- Generic repository over customers, drivers, vehicles and shipments
- Shipment status state machine with an append-only tracking history
- Sort/filter/paginate query engine shared by every entity kind
- Best-effort bulk CSV import and full-state JSON backup/restore
"""

__version__ = "1.0.0"
