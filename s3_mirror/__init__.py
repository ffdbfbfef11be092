"""S3 Mirror パッケージ"""
from typing import Optional
from .errors import (
    S3MirrorError,
    ConfigurationError,
    IgnorePatternError,
    FatalUploadError,
    RetryExhaustedError,
)
from .models.config import Config
from .utils.logger import LoggerManager
from .core.task_runner import TaskRunner


class S3Mirror:
    """S3ミラーのメインクラス"""

    def __init__(self, config_path: str = "config.json"):
        # 設定を読み込み
        self.config = Config.from_file(config_path)

        # ロガーをセットアップ
        self.logger = LoggerManager.setup(self.config.logging)
        self.logger.info("S3 Mirror initialized")

        self.task_runner = TaskRunner(self.config)

    def run(self, parallel: Optional[int] = None, dry_run: Optional[bool] = None) -> int:
        """ミラーリングを実行し、アップロードしたファイル数を返す"""
        self.logger.info("Starting S3 mirror process...")
        return self.task_runner.run(parallel, dry_run)


__all__ = [
    'S3Mirror',
    'Config',
    'S3MirrorError',
    'ConfigurationError',
    'IgnorePatternError',
    'FatalUploadError',
    'RetryExhaustedError',
]
