# src/clinicexport/text_extractor.py
"""
ドキュメント → 生テキストの抽出。

コア側はこれを外部機能として扱い、(Path) -> str の呼び出し可能オブジェクト
なら何でも差し替えられる。失敗時は TextExtractionError を送出すること。

- .pdf: PyMuPDF (fitz) でページ順にテキストを連結
- それ以外: バイト列を読み、chardet で推定したエンコーディングでデコード
"""

from __future__ import annotations
from pathlib import Path
from typing import Callable
import logging

import chardet
import fitz  # PyMuPDF

from clinicexport.errors import TextExtractionError

logger = logging.getLogger(__name__)

TextExtractor = Callable[[Path], str]

# chardet の推定が外れたときに順に試す候補
_FALLBACK_ENCODINGS = ("utf-8", "utf-8-sig", "cp1252", "latin-1")


def decode_bytes(raw: bytes) -> str:
    """chardet の推定結果を優先し、ダメなら候補エンコーディングを順に試す。"""
    guess = chardet.detect(raw)
    encoding = guess.get("encoding")
    if encoding:
        try:
            return raw.decode(encoding)
        except (UnicodeDecodeError, LookupError):
            logger.debug("chardet guess %s failed, falling back", encoding)

    for enc in _FALLBACK_ENCODINGS:
        try:
            return raw.decode(enc)
        except UnicodeDecodeError:
            continue
    # latin-1 は必ず成功するのでここには来ない
    return raw.decode("utf-8", errors="replace")


def _extract_pdf_text(path: Path) -> str:
    with fitz.open(str(path)) as pdf:
        return "\n".join(page.get_text() for page in pdf)


def extract_text(path: Path | str) -> str:
    """
    既定のテキスト抽出器。
    """
    p = Path(path)
    try:
        if p.suffix.lower() == ".pdf":
            text = _extract_pdf_text(p)
        else:
            text = decode_bytes(p.read_bytes())
    except OSError as e:
        raise TextExtractionError(p, str(e)) from e
    except RuntimeError as e:
        # PyMuPDF は壊れた PDF に対して RuntimeError 系を送出する
        raise TextExtractionError(p, str(e)) from e

    logger.debug("Extracted %d characters from %s", len(text), p.name)
    return text
