# src/clinicexport/config.py
"""
パイプライン設定と出力設定。

設定ファイルはホームディレクトリの JSON:
    ~/.clinicexport_config.json
    {
      "pipeline": {"max_workers": 4, "demographic_keyword": "demos", ...},
      "export": {"only_successful": false, "include_headers": true, "flag_minors": false}
    }
ファイルが無い・壊れている場合は既定値で動く。
"""

from __future__ import annotations
from dataclasses import asdict, dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, Optional
import json
import logging

logger = logging.getLogger(__name__)

CONFIG_PATH = Path.home() / ".clinicexport_config.json"


@dataclass
class PipelineConfig:
    max_workers: int = 4
    demographic_keyword: str = "demos"
    statement_keyword: str = "stmt"
    log_level: str = "INFO"

    def __post_init__(self) -> None:
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if not self.demographic_keyword or not self.statement_keyword:
            raise ValueError("role keywords must not be empty")
        if self.demographic_keyword.lower() == self.statement_keyword.lower():
            raise ValueError("role keywords must differ")
        self.log_level = str(self.log_level).upper()
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"unknown log_level: {self.log_level}")


@dataclass
class ExportSettings:
    """
    出力設定。

    - only_successful: エラーが空の患者だけ出力する
    - include_headers: 見出し行を先頭に付ける
    - flag_minors: 未成年フラグを追加列として出す
    """
    only_successful: bool = False
    include_headers: bool = True
    flag_minors: bool = False


@dataclass
class AppConfig:
    pipeline: PipelineConfig = field(default_factory=PipelineConfig)
    export: ExportSettings = field(default_factory=ExportSettings)


def _pick(cls: type, raw: Any) -> Dict[str, Any]:
    # 未知のキーは無視する
    if not isinstance(raw, dict):
        return {}
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in raw.items() if k in names}


def load_config(path: Optional[Path] = None) -> AppConfig:
    """
    設定 JSON を読み込む。無ければ既定値、壊れていれば警告して既定値。
    """
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        return AppConfig()

    try:
        data = json.loads(config_path.read_text(encoding="utf-8"))
        return AppConfig(
            pipeline=PipelineConfig(**_pick(PipelineConfig, data.get("pipeline"))),
            export=ExportSettings(**_pick(ExportSettings, data.get("export"))),
        )
    except (OSError, ValueError, TypeError, AttributeError) as e:
        logger.warning("Ignoring unreadable config %s: %s", config_path, e)
        return AppConfig()


def save_config(config: AppConfig, path: Optional[Path] = None) -> Path:
    config_path = path or CONFIG_PATH
    config_path.write_text(
        json.dumps(asdict(config), ensure_ascii=False, indent=2),
        encoding="utf-8",
    )
    return config_path
