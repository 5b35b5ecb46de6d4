"""Custom exceptions for the livetree package."""


class WatcherError(Exception):
    """Base exception for all watcher errors."""
    pass


class RootNotFoundError(WatcherError):
    """Watch root does not exist or is not a directory."""
    pass


class NotificationError(WatcherError):
    """The OS watch facility delivered a notification outside its contract."""
    pass


class UnsupportedNotificationError(NotificationError):
    """Notification type is not one of created, modified, deleted, moved."""
    pass


class IncompleteRenameError(NotificationError):
    """Rename notification does not carry both an old and a new path."""
    pass
