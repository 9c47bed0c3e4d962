"""
Parser Manager — detects schema files and runs the parse + normalize pipeline.

Supports: JDL (.jdl, .jh).
"""

import json
import logging
import os
from typing import Dict, List, Optional

from .base import find_source_files, read_file_safe
from .jdl_parser import JDLParser
from .relationship_mapping import normalize_relationships

logger = logging.getLogger(__name__)


class UnsupportedSchemaError(Exception):
    """Raised when no parsable schema source is available."""
    pass


class ParserManager:
    """Finds schema sources and turns them into a normalized entity graph."""

    def __init__(self, extensions: List[str] = None, add_missing_inverse: bool = None,
                 model_suffix: str = None):
        # Config loads .env on first import, not on package import
        from ..config import Config

        self.extensions = extensions or Config.JDL_EXTENSIONS
        self.add_missing_inverse = (Config.ADD_MISSING_INVERSE if add_missing_inverse is None
                                    else add_missing_inverse)
        self.model_suffix = model_suffix or Config.MODEL_SUFFIX

    # -----------------------------------------------------------------------
    # Detection
    # -----------------------------------------------------------------------

    def find_schema_files(self, project_path: str) -> List[str]:
        """Return JDL files under project_path in path order."""
        if not os.path.isdir(project_path):
            return []
        return find_source_files(project_path, self.extensions)

    def detect_schema_format(self, project_path: str) -> str:
        """Return 'jdl' when the project contains JDL files, else 'unknown'."""
        return 'jdl' if self.find_schema_files(project_path) else 'unknown'

    # -----------------------------------------------------------------------
    # Parsing
    # -----------------------------------------------------------------------

    def parse_text(self, jdl_text: str, add_missing_inverse: Optional[bool] = None) -> Dict:
        """Parse JDL text and normalize its relationships.

        Returns the parser's result dict with every relationship field
        annotated and linked to its inverse where one exists.
        """
        return self._normalize(JDLParser().parse_text(jdl_text), add_missing_inverse)

    def parse_file(self, file_path: str, add_missing_inverse: Optional[bool] = None) -> Dict:
        """Parse a single JDL file."""
        content = read_file_safe(file_path)
        if content is None:
            raise UnsupportedSchemaError(f"Cannot read schema file {file_path}")
        return self.parse_text(content, add_missing_inverse)

    def parse_schema(self, project_path: str, add_missing_inverse: Optional[bool] = None) -> Dict:
        """Parse every JDL file under project_path as one schema.

        Files are concatenated in path order so a relationship may refer
        to entities declared in another file.
        """
        files = self.find_schema_files(project_path)
        if not files:
            raise UnsupportedSchemaError(
                f"No JDL schema found in {project_path}. "
                f"Supported extensions: {', '.join(self.extensions)}")

        result = JDLParser().parse(project_path, self.extensions)
        return self._normalize(result, add_missing_inverse)

    def _normalize(self, result: Dict, add_missing_inverse: Optional[bool]) -> Dict:
        if add_missing_inverse is None:
            add_missing_inverse = self.add_missing_inverse
        normalize_relationships(result['entities'], add_missing_inverse=add_missing_inverse,
                                model_suffix=self.model_suffix)
        return result

    @staticmethod
    def to_json(result: Dict, indent: Optional[int] = 2) -> str:
        """Serialize a parse result; it holds plain values only."""
        return json.dumps(result, indent=indent)
