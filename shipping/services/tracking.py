import uuid


def new_tracking_id() -> str:
    """Return a fresh shipment tracking id (random 128-bit UUID4, canonical form)."""
    return str(uuid.uuid4())
