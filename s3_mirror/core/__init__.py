"""S3 Mirror コアモジュール"""
from .s3_client import S3ClientManager
from .uploader import UploadExecutor, ParallelUploadExecutor, RetryPolicy, UploadCounter
from .task_runner import TaskRunner

__all__ = [
    'S3ClientManager',
    'UploadExecutor',
    'ParallelUploadExecutor',
    'RetryPolicy',
    'UploadCounter',
    'TaskRunner'
]
