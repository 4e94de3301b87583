"""Resource tracker: single-tenant resource and inventory tracking."""
