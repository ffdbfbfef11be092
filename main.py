#!/usr/bin/env python3
"""S3 Mirror - エントリーポイント"""
import argparse
import sys

from s3_mirror import S3Mirror, S3MirrorError
from s3_mirror.utils.logger import LoggerManager


def parse_args(argv=None) -> argparse.Namespace:
    """コマンドライン引数を解析"""
    parser = argparse.ArgumentParser(
        prog="s3-mirror",
        description="Mirror a local directory tree onto an S3 bucket",
    )
    parser.add_argument(
        "-c", "--config",
        default="config.json",
        help="path to the JSON configuration file (default: config.json)",
    )
    parser.add_argument(
        "-p", "--parallel",
        type=int,
        default=None,
        help="number of parallel upload workers (overrides options.parallel)",
    )
    parser.add_argument(
        "-n", "--dry-run",
        action="store_true",
        default=None,
        help="log what would be uploaded without transferring anything",
    )
    args = parser.parse_args(argv)

    if args.parallel is not None and args.parallel < 1:
        parser.error("--parallel must be at least 1")

    return args


def main(argv=None) -> int:
    """メイン関数"""
    args = parse_args(argv)

    try:
        mirror = S3Mirror(args.config)
        uploaded = mirror.run(parallel=args.parallel, dry_run=args.dry_run)
    except S3MirrorError as e:
        LoggerManager.get_logger().error(f"Error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except OSError as e:
        # ソースディレクトリの走査エラー
        LoggerManager.get_logger().error(f"Error: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"{uploaded} files uploaded")
    return 0


if __name__ == "__main__":
    sys.exit(main())
