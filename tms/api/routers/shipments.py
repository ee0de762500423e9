"""Shipment-specific endpoints: status changes, proof of delivery, references."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from tms.api.dependencies import get_engine
from tms.engine import TransportEngine
from tms.models.entities.shipment import ShipmentStatus

router = APIRouter()


class StatusChangeRequest(BaseModel):
    """New status for a shipment."""
    status: ShipmentStatus
    note: str | None = Field(default=None, description="Tracking note")
    location: str | None = Field(default=None, description="Tracking location")


class ProofOfDeliveryRequest(BaseModel):
    """Proof-of-delivery image reference (URL or data URI)."""
    image: str = Field(..., min_length=1)


@router.post("/{shipment_id}/status")
def change_status(
    shipment_id: str,
    request: StatusChangeRequest,
    engine: TransportEngine = Depends(get_engine),
):
    """Set a shipment's status; a tracking event is recorded when it changes."""
    shipment = engine.transition_shipment(shipment_id, request.status, note=request.note, location=request.location)
    return shipment.to_record()


@router.post("/{shipment_id}/proof-of-delivery")
def attach_proof_of_delivery(
    shipment_id: str,
    request: ProofOfDeliveryRequest,
    engine: TransportEngine = Depends(get_engine),
):
    """Attach a proof-of-delivery image to a shipment."""
    return engine.attach_proof_of_delivery(shipment_id, request.image).to_record()


@router.get("/{shipment_id}/references")
def get_references(shipment_id: str, engine: TransportEngine = Depends(get_engine)):
    """Display names for the customer, vehicle and driver of a shipment."""
    return engine.resolver.describe_shipment(engine.shipments.get(shipment_id))
