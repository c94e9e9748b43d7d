"""
遮罩比對命令列工具
用於比對兩個圖像的零紅色遮罩相似度
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from maskdiff.decode import load_image
from maskdiff.exceptions import MaskDiffError
from maskdiff.image_compare import ImageComparison, compare_images_detailed

EXIT_MATCH = 0
EXIT_MISMATCH = 1
EXIT_INPUT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='maskdiff',
        description='遮罩比對工具 - 以紅色通道遮罩比對兩個圖像',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
使用範例:
  maskdiff image1.png image2.png
  maskdiff image1.png image2.png --threshold 0.98 --json
        """
    )

    parser.add_argument('image1', type=str, help='第一個圖像路徑')
    parser.add_argument('image2', type=str, help='第二個圖像路徑')
    parser.add_argument(
        '--threshold',
        type=float,
        default=0.95,
        help='相似度閾值 (0-1)，預設為 0.95 (95%%)'
    )
    parser.add_argument('--verbose', action='store_true', help='顯示詳細比對資訊與除錯日誌')
    parser.add_argument('--json', action='store_true', help='以 JSON 格式輸出結果')
    parser.add_argument(
        '--no-log',
        action='store_true',
        help='不保存比對記錄到檔案'
    )
    parser.add_argument(
        '--log-dir',
        type=str,
        default='logs',
        help='比對記錄目錄，預設為 logs'
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """主函數"""
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # 檢查閾值範圍
    if not 0 <= args.threshold <= 1:
        print("錯誤：閾值必須在 0 到 1 之間", file=sys.stderr)
        return EXIT_INPUT_ERROR

    try:
        image1 = load_image(args.image1)
        image2 = load_image(args.image2)
        result = compare_images_detailed(image1, image2)
    except MaskDiffError as e:
        print(f"錯誤：{e}", file=sys.stderr)
        return EXIT_INPUT_ERROR

    is_match = result.similarity >= args.threshold

    if args.json:
        payload = result.to_dict()
        payload['is_match'] = is_match
        payload['threshold'] = args.threshold
        print(json.dumps(payload, ensure_ascii=False, indent=2))
    else:
        print_report(args.image1, args.image2, result, is_match, args.threshold, args.verbose)

    # 保存記錄到檔案
    if not args.no_log:
        save_comparison_log(Path(args.log_dir), args.image1, args.image2, result, is_match, args.threshold)

    return EXIT_MATCH if is_match else EXIT_MISMATCH


def print_report(image1_path: str, image2_path: str, result: ImageComparison,
                 is_match: bool, threshold: float, verbose: bool) -> None:
    print(f"  圖像1: {image1_path}")
    print(f"  圖像2: {image2_path}")
    print(f"  相似度閾值: {threshold * 100:.1f}%")
    print()
    print("=" * 50)
    print("比對結果")
    print("=" * 50)

    if is_match:
        print("✓ 兩個圖像的遮罩一致")
    else:
        print("✗ 兩個圖像的遮罩不一致")

    print(f"\n相似度: {result.similarity * 100:.2f}%")

    if verbose:
        print("\n詳細資訊:")
        print(f"  圖像1 尺寸: {result.image1_size[0]}x{result.image1_size[1]}")
        print(f"  圖像2 尺寸: {result.image2_size[0]}x{result.image2_size[1]}")
        print(f"  縮放: {result.resized} -> {result.target_size[0]}x{result.target_size[1]}")
        print(f"  一致像素: {result.matched_positions}/{result.total_positions}")
        print(f"  圖像1 前景比例: {result.foreground_ratio1 * 100:.2f}%")
        print(f"  圖像2 前景比例: {result.foreground_ratio2 * 100:.2f}%")

    print("=" * 50)


def save_comparison_log(log_dir: Path, image1_path: str, image2_path: str,
                        result: ImageComparison, is_match: bool, threshold: float) -> Path:
    """
    保存比對記錄到 JSON 檔案

    Args:
        log_dir: 記錄目錄
        image1_path: 第一個圖像路徑
        image2_path: 第二個圖像路徑
        result: 比對結果
        is_match: 是否匹配
        threshold: 閾值

    Returns:
        記錄檔路徑
    """
    log_file = log_dir / "comparison_log.json"

    # 讀取現有記錄
    records = []
    if log_file.exists():
        try:
            with open(log_file, 'r', encoding='utf-8') as f:
                records = json.load(f)
        except (json.JSONDecodeError, IOError):
            records = []

    records.append({
        'timestamp': datetime.now().isoformat(),
        'image1': str(Path(image1_path).resolve()),
        'image2': str(Path(image2_path).resolve()),
        'is_match': is_match,
        'similarity': round(result.similarity, 4),
        'threshold': round(threshold, 4),
        'details': {
            'image1_size': list(result.image1_size),
            'image2_size': list(result.image2_size),
            'resized': result.resized,
            'matched_positions': result.matched_positions,
            'total_positions': result.total_positions,
        }
    })

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        with open(log_file, 'w', encoding='utf-8') as f:
            json.dump(records, f, ensure_ascii=False, indent=2)
    except IOError as e:
        print(f"\n警告：無法保存記錄到檔案: {e}", file=sys.stderr)

    return log_file


if __name__ == '__main__':
    sys.exit(main())
