"""S3ミラーの例外クラス"""
from typing import Optional


class S3MirrorError(Exception):
    """S3ミラーの基底例外"""


class ConfigurationError(S3MirrorError):
    """設定エラー（アップロード開始前に発生）"""


class IgnorePatternError(S3MirrorError):
    """除外パターンのコンパイルエラー"""

    def __init__(self, pattern: str, reason: str):
        super().__init__(f"Invalid ignore pattern {pattern!r}: {reason}")
        self.pattern = pattern
        self.reason = reason


class FatalUploadError(S3MirrorError):
    """リトライしないアップロードエラー（実行全体を停止する）"""

    def __init__(self, path: str, cause: Optional[BaseException] = None, message: Optional[str] = None):
        self.path = path
        self.cause = cause
        if message is None:
            message = f"Failed to upload {path}: {cause}"
        super().__init__(message)


class RetryExhaustedError(FatalUploadError):
    """リトライ上限に達したエラー"""

    def __init__(self, path: str, attempts: int, cause: Optional[BaseException] = None):
        self.attempts = attempts
        super().__init__(
            path,
            cause,
            message=f"Failed to upload {path} after {attempts} attempts: {cause}",
        )
