"""Resource categories and statuses."""
import enum


class ResourceCategory(str, enum.Enum):
    """Resource categories for small and micro businesses."""
    EQUIPMENT = "Equipment"
    RAW_MATERIALS = "Raw Materials"
    SERVICES = "Services"
    SOFTWARE = "Software"
    PERSONNEL = "Personnel"
    TRAINING = "Training"
    COMPLIANCE = "Compliance"
    MARKETING = "Marketing"


class ResourceStatus(str, enum.Enum):
    """Stock status of a resource."""
    AVAILABLE = "Available"
    LOW_STOCK = "Low Stock"
    ON_ORDER = "On Order"
    DEPLETED = "Depleted"


RESOURCE_CATEGORIES = [category.value for category in ResourceCategory]
RESOURCE_STATUSES = [status.value for status in ResourceStatus]
