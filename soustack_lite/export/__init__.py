from __future__ import annotations

from .json_export import export_filename, export_json, write_json

__all__ = ["export_json", "write_json", "export_filename"]
