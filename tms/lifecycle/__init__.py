"""Shipment lifecycle."""

from tms.lifecycle.state_machine import CREATED_NOTE, ShipmentStateMachine

__all__ = ["ShipmentStateMachine", "CREATED_NOTE"]
