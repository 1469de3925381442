"""Export file management for generated policy documents."""

import json
from pathlib import Path
from datetime import datetime
from typing import Optional, Dict, List
from edgefav.core.errors import FormatError
from edgefav.utils.logger import setup_logger
from edgefav.utils.validators import sanitize_filename

logger = setup_logger()

EXPORT_FILE_NAMES = {
    "windows": "edge-favorites-windows-{stamp}.json",
    "macos": "edge-favorites-macos-{stamp}.mobileconfig",
}


class ExportManager:
    """Writes exported documents to disk and keeps an index of them."""

    def __init__(self, export_dir: Path = Path("./exports")):
        """
        Initialize export manager.

        Args:
            export_dir: Directory to store exported documents
        """
        self.export_dir = Path(export_dir)
        self.metadata_file = self.export_dir / "metadata.json"

    def _load_metadata(self) -> Dict:
        """Load export metadata."""
        if self.metadata_file.exists():
            try:
                with open(self.metadata_file, 'r', encoding='utf-8') as f:
                    return json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Failed to load export metadata: {e}")
        return {"exports": []}

    def _save_metadata(self, metadata: Dict):
        """Save export metadata."""
        try:
            with open(self.metadata_file, 'w', encoding='utf-8') as f:
                json.dump(metadata, f, indent=2, default=str)
        except OSError as e:
            logger.error(f"Failed to save export metadata: {e}")

    def export_filename(self, format_name: str, moment: Optional[datetime] = None) -> str:
        """Download-style file name stamped with epoch milliseconds."""
        moment = moment or datetime.now()
        stamp = int(moment.timestamp() * 1000)
        template = EXPORT_FILE_NAMES.get(format_name, "edge-favorites-{format}-{stamp}.txt")
        return sanitize_filename(template.format(stamp=stamp, format=format_name))

    def save(self, format_name: str, content: str, output: Optional[Path] = None) -> Path:
        """
        Write an exported document.

        Args:
            format_name: 'windows' or 'macos'
            content: Document text
            output: Explicit destination; defaults to <export_dir>/<format>/<file name>

        Returns:
            Path to the written file

        Raises:
            OSError: If the file cannot be written
        """
        if output is not None:
            export_path = Path(output)
        else:
            export_path = self.export_dir / format_name / self.export_filename(format_name)

        export_path.parent.mkdir(parents=True, exist_ok=True)
        with open(export_path, 'w', encoding='utf-8') as f:
            f.write(content)

        self.export_dir.mkdir(parents=True, exist_ok=True)
        metadata = self._load_metadata()
        metadata["exports"].append({
            "timestamp": datetime.now().isoformat(),
            "format": format_name,
            "file": export_path.name,
            "path": str(export_path),
            "size": export_path.stat().st_size
        })
        self._save_metadata(metadata)

        logger.info(f"Saved {format_name} export to {export_path}")
        return export_path

    def read_document(self, path: Path) -> str:
        """
        Read an import document as text.

        Raises:
            OSError: If the file cannot be read
            FormatError: If the file is not UTF-8 text
        """
        try:
            with open(path, 'r', encoding='utf-8-sig') as f:
                return f.read()
        except UnicodeDecodeError as e:
            raise FormatError(f"{Path(path).name} is not a UTF-8 text document ({e.reason})")

    def _is_managed(self, path: Path) -> bool:
        """True if path lies inside the export directory."""
        try:
            return path.resolve().is_relative_to(self.export_dir.resolve())
        except (OSError, ValueError):
            return False

    def list_exports(self, format_name: Optional[str] = None) -> List[Dict]:
        """
        List recorded exports, optionally filtered by format.

        Returns:
            List of export metadata dicts, newest first
        """
        metadata = self._load_metadata()
        exports = metadata.get("exports", [])

        if format_name:
            exports = [e for e in exports if e.get("format") == format_name]

        exports.sort(key=lambda x: x.get("timestamp", ""), reverse=True)
        return exports

    def get_latest_export(self, format_name: str) -> Optional[Dict]:
        """Latest export metadata for a format, or None."""
        exports = self.list_exports(format_name)
        return exports[0] if exports else None

    def cleanup_old_exports(self, retention_days: int = 30) -> int:
        """
        Remove exports older than retention_days.

        Returns:
            Number of files removed
        """
        metadata = self._load_metadata()
        exports = metadata.get("exports", [])
        cutoff_date = datetime.now().timestamp() - (retention_days * 24 * 60 * 60)

        kept_exports = []
        removed_count = 0

        for export in exports:
            try:
                export_time = datetime.fromisoformat(export["timestamp"]).timestamp()
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Error processing export {export.get('file')}: {e}")
                kept_exports.append(export)
                continue

            if export_time < cutoff_date:
                export_path = Path(export.get("path", ""))
                if not self._is_managed(export_path):
                    logger.debug(f"Forgetting {export_path}; it lies outside {self.export_dir}")
                elif export_path.is_file():
                    export_path.unlink()
                    removed_count += 1
            else:
                kept_exports.append(export)

        metadata["exports"] = kept_exports
        if self.metadata_file.exists():
            self._save_metadata(metadata)

        if removed_count > 0:
            logger.info(f"Cleaned up {removed_count} old export(s)")
        return removed_count
