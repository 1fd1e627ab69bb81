from .activity_logs import ActivityLog
