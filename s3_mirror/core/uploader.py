"""S3アップロード実行クラス"""
import os
import posixpath
import queue
import threading
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Callable, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from ..errors import FatalUploadError, RetryExhaustedError
from ..models.config import S3Config
from ..utils.file_utils import guess_content_type
from ..utils.logger import LoggerManager


# サービス/通信由来のエラーのみリトライする
RETRYABLE_ERRORS = (ClientError, BotoCoreError)


@dataclass(frozen=True)
class RetryPolicy:
    """リトライ設定（固定間隔）"""
    max_attempts: int = 30
    delay_seconds: float = 1.0


class UploadCounter:
    """アップロード済みファイル数（スレッド間で共有）"""

    def __init__(self):
        self._value = 0
        self._lock = threading.Lock()

    def add(self, count: int):
        with self._lock:
            self._value += count

    @property
    def value(self) -> int:
        with self._lock:
            return self._value


class UploadExecutor:
    """ファイルアップロードの実行"""

    def __init__(
        self,
        s3_client,
        s3_config: S3Config,
        source_root: str,
        retry_policy: Optional[RetryPolicy] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.s3_client = s3_client
        self.s3_config = s3_config
        self.source_root = source_root
        self.retry_policy = retry_policy or RetryPolicy()
        self.logger = LoggerManager.get_logger()
        self._sleep = sleep

    def destination_key(self, relative_path: str) -> str:
        """アップロード先のキーを計算（"/" + prefix + "/" + 相対パス）"""
        prefix = self.s3_config.prefix.strip("/")
        return posixpath.normpath(posixpath.join("/", prefix, relative_path))

    def upload_file(self, relative_path: str, dry_run: bool = False) -> int:
        """単一ファイルをアップロードし、アップロードした件数を返す"""
        local_path = os.path.join(self.source_root, relative_path)

        try:
            body = open(local_path, "rb")
        except OSError as e:
            raise FatalUploadError(relative_path, e) from e

        with body:
            content_type = guess_content_type(relative_path)
            s3_key = self.destination_key(relative_path)

            if dry_run:
                self.logger.info(f"[DRYRUN] uploading {s3_key} ...")
                return 0

            self.logger.info(f"uploading {s3_key} ...")

            params = {
                "Bucket": self.s3_config.bucket,
                "Key": s3_key,
                "ACL": self.s3_config.acl,
                "ContentType": content_type,
                "Body": body,
            }
            if self.s3_config.cache_control:
                params["CacheControl"] = self.s3_config.cache_control

            self.s3_client.put_object(**params)
            return 1

    def upload_with_retry(self, relative_path: str, dry_run: bool = False) -> int:
        """リトライ付きでアップロード

        通信/サービスのエラーは固定間隔でリトライし、上限に達したら
        RetryExhaustedError を送出する。それ以外のエラーは即座に致命的エラー。
        """
        max_attempts = self.retry_policy.max_attempts
        delay = self.retry_policy.delay_seconds
        last_error: Optional[BaseException] = None

        for attempt in range(1, max_attempts + 1):
            try:
                return self.upload_file(relative_path, dry_run)
            except RETRYABLE_ERRORS as e:
                last_error = e
                self.logger.debug(
                    f"Upload attempt {attempt}/{max_attempts} failed for {relative_path}: {e}"
                )
                if attempt < max_attempts:
                    self.logger.warning(
                        f"failed to upload {relative_path}, retrying in {delay:g} second ..."
                    )
                    self._sleep(delay)
            except FatalUploadError:
                raise
            except Exception as e:
                raise FatalUploadError(
                    relative_path, e, message=f"unknown error uploading {relative_path}: {e!r}"
                ) from e

        raise RetryExhaustedError(relative_path, max_attempts, last_error) from last_error


class ParallelUploadExecutor:
    """並列アップロード実行"""

    def __init__(self, executor: UploadExecutor, max_workers: int = 4):
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")
        self.executor = executor
        self.max_workers = max_workers
        self.logger = LoggerManager.get_logger()

    def upload_files(self, relative_paths: List[str], dry_run: bool = False) -> int:
        """複数ファイルを並列でアップロード

        Args:
            relative_paths: アップロードする相対パスのリスト
            dry_run: Trueなら転送せずにログのみ出力

        Returns:
            アップロードしたファイル数

        Raises:
            FatalUploadError: いずれかのワーカーで致命的エラーが発生した場合
        """
        # 全タスクを先に投入し、以降は追加しない
        tasks: "queue.Queue[str]" = queue.Queue(maxsize=len(relative_paths))
        for relative_path in relative_paths:
            tasks.put_nowait(relative_path)

        counter = UploadCounter()
        stop = threading.Event()

        self.logger.info(
            f"Starting parallel upload of {len(relative_paths)} files with {self.max_workers} workers"
        )

        def worker(worker_id: int):
            while not stop.is_set():
                try:
                    relative_path = tasks.get_nowait()
                except queue.Empty:
                    return

                try:
                    count = self.executor.upload_with_retry(relative_path, dry_run)
                except Exception:
                    # 1件でも失敗したら実行全体を止める
                    stop.set()
                    raise

                counter.add(count)

        errors: List[BaseException] = []

        with ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="s3-mirror") as pool:
            futures = [pool.submit(worker, i) for i in range(self.max_workers)]

            for future in as_completed(futures):
                error = future.exception()
                if error is not None:
                    self.logger.error(f"Upload worker stopped: {error}")
                    errors.append(error)

        if errors:
            raise errors[0]

        return counter.value
