"""ミラーリング処理の実行"""
import os
import time
from typing import Optional

from ..models.config import Config
from ..utils.logger import LoggerManager
from ..utils.file_utils import FileScanner
from .uploader import UploadExecutor, ParallelUploadExecutor, RetryPolicy
from .s3_client import S3ClientManager


class TaskRunner:
    """ソースディレクトリをS3バケットにミラーリング"""

    def __init__(self, config: Config, s3_client=None):
        self.config = config
        self.logger = LoggerManager.get_logger()

        self.source_root = os.path.abspath(config.s3.source)
        self.file_scanner = FileScanner(config.s3.ignore)
        self.retry_policy = RetryPolicy(
            max_attempts=config.options.max_attempts,
            delay_seconds=config.options.retry_delay_seconds,
        )

        # クライアントは実際に転送するときだけ作成する
        self._s3_client = s3_client
        self.client_manager = S3ClientManager(config.s3)

    def get_client(self):
        """S3クライアントを取得"""
        if self._s3_client is None:
            self._s3_client = self.client_manager.get_client()
        return self._s3_client

    def run(self, parallel: Optional[int] = None, dry_run: Optional[bool] = None) -> int:
        """ファイルを列挙してアップロードし、アップロードしたファイル数を返す"""
        if parallel is None:
            parallel = self.config.options.parallel
        if dry_run is None:
            dry_run = self.config.options.dry_run

        started = time.monotonic()

        # 列挙エラーはそのまま送出（アップロードは開始しない）
        files = self.file_scanner.list_files(self.source_root)
        self.logger.info(f"Found {len(files)} files to upload in {self.source_root}")

        s3_client = None if dry_run else self.get_client()
        executor = UploadExecutor(
            s3_client,
            self.config.s3,
            self.source_root,
            self.retry_policy,
        )
        parallel_executor = ParallelUploadExecutor(executor, parallel)

        uploaded = parallel_executor.upload_files(files, dry_run)

        elapsed = time.monotonic() - started
        self.logger.info(
            f"Upload completed: {uploaded}/{len(files)} files uploaded "
            f"to {self.config.s3.bucket} in {elapsed:.1f}s"
            + (" (dry run)" if dry_run else "")
        )
        return uploaded
