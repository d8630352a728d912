from .sqs_queue_publisher import SqsQueuePublisher

__all__ = ["SqsQueuePublisher"]
