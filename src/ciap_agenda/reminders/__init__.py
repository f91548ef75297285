from ciap_agenda.reminders.queue import NotificationQueue
from ciap_agenda.reminders.scheduler import ReminderScheduler, compute_newly_due, trigger_millis

__all__ = ["NotificationQueue", "ReminderScheduler", "compute_newly_due", "trigger_millis"]
