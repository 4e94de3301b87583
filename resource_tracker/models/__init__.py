# Models package
from resource_tracker.models.resource import (
    ResourceCategory,
    ResourceStatus,
    RESOURCE_CATEGORIES,
    RESOURCE_STATUSES,
)
from resource_tracker.models.settings import Preference, Theme, PREFERENCE_KEYS
