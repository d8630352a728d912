"""DynamoDB stream trigger that fans changed records out to SQS queues."""

__version__ = "0.1.0"
