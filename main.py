# main.py
"""
clinicexport のエントリポイント（ヘッドレス実行）。

- src/ を import パスに追加
- 引数のファイル／フォルダから DEMOS・STMT を集めてバッチを実行し、
  患者ごとの結果を標準出力に表示する
"""

import argparse
import logging
import sys
from pathlib import Path

# ──────────────────────────────────────────────
# src ディレクトリを import パスに追加
# ──────────────────────────────────────────────
ROOT_DIR = Path(__file__).resolve().parent
SRC_DIR = ROOT_DIR / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from clinicexport.batch_orchestrator import BatchOrchestrator  # noqa: E402
from clinicexport.config import load_config  # noqa: E402


def _collect_paths(inputs: list[str]) -> list[Path]:
    paths: list[Path] = []
    for raw in inputs:
        p = Path(raw)
        if p.is_dir():
            paths.extend(sorted(c for c in p.iterdir() if c.is_file()))
        else:
            paths.append(p)
    return paths


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Extract DEMOS/STMT document pairs")
    parser.add_argument("inputs", nargs="+", help="document files or folders")
    parser.add_argument("--config", type=Path, default=None, help="config JSON path")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(
        level=config.pipeline.log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    orchestrator = BatchOrchestrator(config=config)
    orchestrator.submit(_collect_paths(args.inputs))

    for record in orchestrator.subjects:
        status = "OK" if record.processed and not record.errors else "NG"
        print(f"{record.subject_id:>10} [{status}] errors={record.error_count} warnings={len(record.warnings)}")
        for message in record.errors:
            print(f"{'':>10}   - {message}")

    print(f"progress: {orchestrator.current_progress}/{orchestrator.total_files}")
    return 0 if not orchestrator.subjects_with_errors else 1


if __name__ == "__main__":
    raise SystemExit(main())
