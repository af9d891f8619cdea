SERVICE_NAME = "queue-poller"
