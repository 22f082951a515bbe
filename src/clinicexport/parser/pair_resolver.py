# src/clinicexport/parser/pair_resolver.py

from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, List
import logging
import re

from clinicexport.errors import InputFormatError
from clinicexport.models.document_pair import DocumentPair, DocumentRole

logger = logging.getLogger(__name__)

# 先頭の数字列 + 区切り文字（"_" または英数字以外）
SUBJECT_ID_PATTERN = re.compile(r"^(\d+)(?:_|[^\w])")

# ファイル名を解釈できなかったパスをまとめる疑似 ID
UNPARSABLE_SUBJECT_ID = "unparsable"

DEFAULT_DEMOGRAPHIC_KEYWORD = "demos"
DEFAULT_STATEMENT_KEYWORD = "stmt"


@dataclass
class PairResolution:
    """
    resolve_pairs の結果。

    - pairs: 患者 ID → DocumentPair（最初に見た順）
    - rejected: 解釈できなかったパスのエラー（unparsable バケット）
    """
    pairs: Dict[str, DocumentPair] = field(default_factory=dict)
    rejected: List[InputFormatError] = field(default_factory=list)

    @property
    def unparsable(self) -> DocumentPair | None:
        if not self.rejected:
            return None
        return DocumentPair(
            subject_id=UNPARSABLE_SUBJECT_ID,
            errors=[str(e) for e in self.rejected],
        )


def extract_subject_id(path: Path | str) -> str:
    """
    ファイル名先頭の数字列を患者 ID として返す。

    例:
        "18420_demos.pdf" -> "18420"
    """
    name = Path(path).name
    m = SUBJECT_ID_PATTERN.match(name)
    if not m:
        raise InputFormatError(path, "Invalid filename format")
    return m.group(1)


def detect_role(
    path: Path | str,
    demographic_keyword: str = DEFAULT_DEMOGRAPHIC_KEYWORD,
    statement_keyword: str = DEFAULT_STATEMENT_KEYWORD,
) -> DocumentRole:
    """
    ファイル名のキーワード（大文字小文字無視）から種別を判定する。
    どちらにも一致しない・両方に一致する場合は InputFormatError。
    """
    name = Path(path).name.lower()
    is_demos = demographic_keyword.lower() in name
    is_stmt = statement_keyword.lower() in name

    if is_demos and is_stmt:
        raise InputFormatError(path, "Ambiguous document type in filename")
    if is_demos:
        return DocumentRole.DEMOGRAPHIC
    if is_stmt:
        return DocumentRole.STATEMENT
    raise InputFormatError(path, "Cannot determine document type from filename")


def resolve_pairs(
    paths: Iterable[Path | str],
    demographic_keyword: str = DEFAULT_DEMOGRAPHIC_KEYWORD,
    statement_keyword: str = DEFAULT_STATEMENT_KEYWORD,
) -> PairResolution:
    """
    パスの列を患者 ID ごとの DEMOS/STMT 組にまとめる。

    同じ ID・同じ種別が2回出てきた場合は後勝ち。置き換えられたパスは
    DocumentPair.overwritten に残し、警告ログを出す。
    """
    result = PairResolution()

    for raw in paths:
        path = Path(raw)
        try:
            subject_id = extract_subject_id(path)
            role = detect_role(path, demographic_keyword, statement_keyword)
        except InputFormatError as e:
            logger.warning("Rejected input %s: %s", path.name, e)
            result.rejected.append(e)
            continue

        pair = result.pairs.get(subject_id)
        if pair is None:
            pair = DocumentPair(subject_id=subject_id)
            result.pairs[subject_id] = pair

        previous = pair.get(role)
        if previous is not None:
            logger.warning(
                "Subject %s: %s document %s replaced by %s",
                subject_id, role.value, previous.name, path.name,
            )
        pair.set(role, path)

    return result
