#!/usr/bin/env python3
"""
KUBESHORT ENGINE - The File Orchestrator
----------------------------------------
The TranscodeEngine drives short-form PersistentVolume files through the
codec: read, decode every document, re-encode into canonical form, and
optionally persist the result with a backup and an atomic write.

Codec errors are per-file: they are logged and reported, never fatal to a
batch.

Author: KubeShort Team
Date: 2026-01-16
"""

import os
import shutil
import time
import logging
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from ruamel.yaml import YAMLError

from kubeshort.codec.resource import (
    WRAPPER_KEY,
    decode_persistent_volume,
    decode_wrapped,
    encode_persistent_volume,
    encode_wrapped,
)
from kubeshort.core.errors import KubeShortError
from kubeshort.core.exporter import ShortExporter, load_documents
from kubeshort.core.models import PersistentVolume

logger = logging.getLogger("kubeshort.engine")

BACKUP_SUFFIX = ".kubeshort.backup"
TEMP_SUFFIX = ".kubeshort.tmp"


def is_wrapped(doc: Any) -> bool:
    return isinstance(doc, dict) and set(doc.keys()) == {WRAPPER_KEY}


class TranscodeEngine:
    """
    Principal orchestrator for short-form PersistentVolume files.
    Keeps workspace state and coordinates loading, the codec and the exporter.
    """

    def __init__(self, workspace_path: str, as_json: bool = False):
        self.workspace = Path(workspace_path).resolve()
        self.as_json = as_json
        self.exporter = ShortExporter()

        if not self.workspace.exists():
            raise FileNotFoundError(f"Workspace does not exist: {self.workspace}")

    def _decode_envelopes(self, text: str) -> List[Tuple[PersistentVolume, bool]]:
        """Decodes every document once, remembering whether it was wrapped."""
        decoded = []
        for doc in load_documents(text):
            if is_wrapped(doc):
                decoded.append((decode_wrapped(doc), True))
            else:
                decoded.append((decode_persistent_volume(doc), False))
        return decoded

    def _export(self, decoded: List[Tuple[PersistentVolume, bool]]) -> str:
        encoded = [
            encode_wrapped(pv) if wrapped else encode_persistent_volume(pv)
            for pv, wrapped in decoded
        ]
        return self.exporter.export(encoded, as_json=self.as_json)

    def decode_documents(self, text: str) -> List[PersistentVolume]:
        """Decodes every document in the text, flat or wrapped."""
        return [pv for pv, _ in self._decode_envelopes(text)]

    def transcode_text(self, text: str) -> str:
        """Decodes then re-encodes, keeping each document's envelope style."""
        return self._export(self._decode_envelopes(text))

    def process_file(self, relative_path: str, dry_run: bool = True) -> Dict[str, Any]:
        """
        Runs one file through a decode/encode cycle and, unless dry_run,
        writes the canonical form back in place.
        """
        full_path = (self.workspace / relative_path).resolve()

        if not full_path.exists():
            return self._file_error(relative_path, "FILE_NOT_FOUND", f"Path missing: {full_path}")

        try:
            raw_text = full_path.read_text(encoding='utf-8-sig')
            decoded = self._decode_envelopes(raw_text)
            final_text = self._export(decoded)
        except KubeShortError as e:
            logger.warning(f"Rejected {relative_path}: {e}")
            return self._file_error(relative_path, "DECODE_ERROR", str(e))
        except (YAMLError, UnicodeDecodeError) as e:
            logger.warning(f"Unparseable {relative_path}: {e}")
            return self._file_error(relative_path, "PARSE_ERROR", str(e))
        except Exception as e:
            logger.error(f"Error processing {relative_path}: {str(e)}")
            return self._file_error(relative_path, "ENGINE_ERROR", str(e))

        volumes = [pv for pv, _ in decoded]
        is_modified = raw_text.strip() != final_text.strip()

        result = {
            "file_path": str(relative_path),
            "success": True,
            "status": self._derive_status(is_modified, dry_run, bool(volumes)),
            "volumes": [self._describe(pv) for pv in volumes],
            "written": False,
            "backup_created": None,
            "original_content": raw_text,
            "canonical_content": final_text if is_modified else None,
            "timestamp": time.time(),
        }

        if not dry_run and is_modified and volumes:
            backup_path = self._create_unique_backup(full_path)
            try:
                shutil.copy2(full_path, backup_path)
                result["backup_created"] = str(backup_path.relative_to(self.workspace))
            except OSError as e:
                result["backup_warning"] = f"Backup failed: {str(e)}"

            try:
                self._atomic_write(full_path, final_text)
                result["written"] = True
            except IOError as e:
                result["write_error"] = str(e)
                result["success"] = False

        return result

    def scan_directory(self, extension: str = ".yaml", dry_run: bool = True,
                       progress_callback: Optional[Callable[[int, int], None]] = None) -> List[Dict[str, Any]]:
        """Processes every matching file under the workspace (symlinks skipped)."""
        patterns = {f"*{extension.lower()}", f"*{extension.upper()}"}
        all_files = sorted({
            f for p in patterns for f in self.workspace.rglob(p)
            if f.is_file() and not f.is_symlink() and not f.name.endswith(BACKUP_SUFFIX)
        })

        reports = []
        for processed, file_path in enumerate(all_files, 1):
            rel_path = str(file_path.relative_to(self.workspace))
            reports.append(self.process_file(rel_path, dry_run=dry_run))
            if progress_callback:
                progress_callback(processed, len(all_files))

        return reports

    def generate_summary(self, reports: List[Dict[str, Any]]) -> Dict[str, Any]:
        total = len(reports)
        return {
            "total_files": total,
            "successful": sum(1 for r in reports if r.get("success", False)),
            "empty": sum(1 for r in reports if r.get("status") == "EMPTY"),
            "rejected": sum(1 for r in reports if r.get("status") in ("DECODE_ERROR", "PARSE_ERROR")),
            "system_errors": sum(1 for r in reports if r.get("status") == "ENGINE_ERROR"),
            "written_to_disk": sum(1 for r in reports if r.get("written", False)),
            "backups_created": sum(1 for r in reports if r.get("backup_created") is not None),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }

    def _describe(self, pv: PersistentVolume) -> Dict[str, Any]:
        return {
            "name": pv.meta.name or "<unnamed>",
            "source": type(pv.source).__name__,
        }

    def _derive_status(self, modified: bool, dry: bool, has_volumes: bool) -> str:
        if not has_volumes: return "EMPTY"
        if not modified: return "CANONICAL"
        if dry: return "PREVIEW"
        return "REWRITTEN"

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise PermissionError(f"No write access to {target_path.parent}")
        temp_file = target_path.with_suffix(TEMP_SUFFIX)
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists(): temp_file.unlink()
            raise IOError(f"Atomic write failed: {str(e)}")

    def _create_unique_backup(self, target_path: Path) -> Path:
        backup_path = target_path.with_suffix(BACKUP_SUFFIX)
        counter = 1
        while backup_path.exists():
            backup_path = target_path.with_name(f"{target_path.stem}-{counter}{BACKUP_SUFFIX}")
            counter += 1
        return backup_path

    def _file_error(self, path: str, status: str, error: str) -> Dict[str, Any]:
        return {
            "file_path": path, "status": status, "error": error,
            "success": False, "written": False, "volumes": [],
        }
