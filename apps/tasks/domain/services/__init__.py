from .authorization import ListingScope, TaskAccessPolicy
from .lifecycle import plan_status_change
from .listing import DeadlineScope, completed_cutoff, deadline_window

__all__ = [
    'ListingScope',
    'TaskAccessPolicy',
    'plan_status_change',
    'DeadlineScope',
    'completed_cutoff',
    'deadline_window',
]
