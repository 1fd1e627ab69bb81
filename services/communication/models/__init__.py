from .messages import GroupMessage, MessageComment, MessageLike
from .notifications import Notification, NotificationType
